"""
HotTakes API: Validator Unit Tests
===================================

What:  Schema registry, per-field messages and the id validator.
"""

import pytest

from hottakes.exceptions import ErrorKind, ValidationFailedError
from hottakes.schemas.formats import is_object_id, is_strong_password
from hottakes.services.validation import (
    NOT_AN_OBJECT_MESSAGE,
    SchemaName,
    SchemaNotFoundError,
    get_schema,
    validate,
    validate_id_parameter,
)

VALID_SAUCE = {
    "name": "Sriracha",
    "manufacturer": "Huy Fong Foods",
    "description": "Chili, sugar, garlic, salt and vinegar",
    "mainPepper": "Red jalapeño",
    "heat": 4,
}


def params_of(exc_info):
    return {field["param"]: field["message"] for field in exc_info.value.fields}


class TestRegistry:
    def test_every_schema_name_is_registered(self):
        for name in SchemaName:
            assert get_schema(name) is not None

    def test_unknown_schema_name(self):
        with pytest.raises(SchemaNotFoundError):
            validate("does-not-exist", {})

    def test_schema_not_found_is_a_lookup_error(self):
        assert issubclass(SchemaNotFoundError, LookupError)


class TestSauceSchemas:
    def test_valid_sauce(self):
        sauce = validate(SchemaName.SAUCE_REQUIRED, VALID_SAUCE)
        assert sauce.main_pepper == "Red jalapeño"
        assert sauce.heat == 4

    def test_unknown_properties_dropped(self):
        payload = {**VALID_SAUCE, "likes": 1000, "userId": "someone"}
        sauce = validate(SchemaName.SAUCE_REQUIRED, payload)
        assert not hasattr(sauce, "likes")
        assert "likes" not in sauce.model_dump()

    def test_all_missing_fields_reported(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE_REQUIRED, {})
        fields = params_of(exc_info)
        assert set(fields) == {"name", "manufacturer", "description", "mainPepper", "heat"}
        assert fields["name"] == "The payload must contain the sauce's name"
        assert exc_info.value.kind is ErrorKind.VALIDATION_FAILED

    def test_heat_out_of_range(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE_REQUIRED, {**VALID_SAUCE, "heat": 11})
        assert params_of(exc_info) == {
            "heat": "The heat property must be an integer between 1 and 10"
        }

    def test_heat_string_not_coerced(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE_REQUIRED, {**VALID_SAUCE, "heat": "5"})
        assert "heat" in params_of(exc_info)

    def test_name_too_long(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE_REQUIRED, {**VALID_SAUCE, "name": "x" * 256})
        assert params_of(exc_info)["name"].startswith("The name property must be a string")

    def test_update_accepts_partial_payload(self):
        update = validate(SchemaName.SAUCE, {"heat": 9})
        assert update.changes() == {"heat": 9}

    def test_update_accepts_empty_payload(self):
        assert validate(SchemaName.SAUCE, {}).changes() == {}

    def test_update_rejects_null(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE, {"description": None})
        assert params_of(exc_info) == {"description": "The description property must be a string"}

    def test_update_uses_attribute_names(self):
        update = validate(SchemaName.SAUCE, {"mainPepper": "Habanero"})
        assert update.changes() == {"main_pepper": "Habanero"}

    @pytest.mark.parametrize("payload", [None, [], "sauce", 4])
    def test_non_object_payload(self, payload):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.SAUCE_REQUIRED, payload)
        assert exc_info.value.fields[0]["message"] == NOT_AN_OBJECT_MESSAGE


class TestVoteSchema:
    @pytest.mark.parametrize("like", [-1, 0, 1])
    def test_valid_like_values(self, like):
        assert validate(SchemaName.VOTE, {"like": like}).like == like

    @pytest.mark.parametrize("like", [2, -2, "1", 1.5, True])
    def test_invalid_like_values(self, like):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.VOTE, {"like": like})
        assert params_of(exc_info)["like"].startswith("The like property must be an integer")

    def test_like_required(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.VOTE, {})
        assert params_of(exc_info) == {"like": "The payload must contain the like value"}

    def test_user_id_format_checked(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.VOTE, {"like": 1, "userId": "not-an-id"})
        assert "userId" in params_of(exc_info)

    def test_user_id_optional(self):
        assert validate(SchemaName.VOTE, {"like": 1}).user_id is None


class TestCredentialSchemas:
    def test_valid_credentials(self):
        creds = validate(SchemaName.CREDENTIALS, {"email": "chef@hottakes.io", "password": "Sup3r-secret"})
        assert creds.email == "chef@hottakes.io"

    def test_weak_password(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.CREDENTIALS, {"email": "chef@hottakes.io", "password": "password"})
        assert set(params_of(exc_info)) == {"password"}

    def test_invalid_email(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.CREDENTIALS, {"email": "not-an-email", "password": "Sup3r-secret"})
        assert set(params_of(exc_info)) == {"email"}

    def test_missing_credentials(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate(SchemaName.CREDENTIALS, {})
        assert params_of(exc_info) == {
            "email": "The payload must contain the user email",
            "password": "The payload must contain a strong password",
        }

    def test_login_does_not_check_strength(self):
        login = validate(SchemaName.LOGIN, {"email": "chef@hottakes.io", "password": "weak"})
        assert login.password == "weak"


class TestIdParameter:
    def test_valid_id(self):
        assert validate_id_parameter("64b7f0c2e4b0a1a2b3c4d5e6") == "64b7f0c2e4b0a1a2b3c4d5e6"

    @pytest.mark.parametrize("value", ["", "123", "z" * 24, "64b7f0c2e4b0a1a2b3c4d5e67", None])
    def test_invalid_id(self, value):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate_id_parameter(value)
        assert exc_info.value.fields == [
            {
                "location": "params",
                "param": "id",
                "message": "The id must be a string containing a valid identifier",
            }
        ]


class TestFormats:
    def test_object_id(self):
        assert is_object_id("64B7F0C2E4B0A1A2B3C4D5E6")
        assert not is_object_id(12345)

    @pytest.mark.parametrize(
        "password,expected",
        [
            ("Sup3r-secret", True),
            ("short1!A", True),
            ("Sh0rt!", False),
            ("alllowercase1!", False),
            ("ALLUPPERCASE1!", False),
            ("NoDigits!!", False),
            ("NoSymbols123", False),
        ],
    )
    def test_strong_password(self, password, expected):
        assert is_strong_password(password) is expected
