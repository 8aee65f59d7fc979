"""
HotTakes API: Input Validator
==============================

What:  Validates request payloads against named schemas and path ids.
How:   SchemaName is a closed enum; _REGISTRY maps each member to a pydantic
       model. validate() runs the model and converts every pydantic error
       into one {location, param, message} entry using the model's own
       field_messages / required_messages, so clients get the same message
       for a field whatever the underlying failure was.
Who:   Called by SauceService and UserService before any domain operation.

Not fail-fast: all violations are reported together, at most one message
per property.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hottakes.exceptions import ValidationFailedError
from hottakes.schemas.formats import is_object_id
from hottakes.schemas.sauce import SauceRequired, SauceUpdate, VoteRequest
from hottakes.schemas.user import Credentials, LoginRequest

logger = logging.getLogger(__name__)

NOT_AN_OBJECT_MESSAGE = "The payload must be a JSON object"
INVALID_ID_MESSAGE = "The id must be a string containing a valid identifier"


class SchemaName(str, Enum):
    CREDENTIALS = "credentials"
    LOGIN = "login"
    SAUCE = "sauce"
    SAUCE_REQUIRED = "sauceRequired"
    VOTE = "vote"


class SchemaNotFoundError(LookupError):
    """Raised for a schema name that has no registered model."""


_REGISTRY: Dict[SchemaName, Type[BaseModel]] = {
    SchemaName.CREDENTIALS: Credentials,
    SchemaName.LOGIN: LoginRequest,
    SchemaName.SAUCE: SauceUpdate,
    SchemaName.SAUCE_REQUIRED: SauceRequired,
    SchemaName.VOTE: VoteRequest,
}

_MISSING = [name for name in SchemaName if name not in _REGISTRY]
if _MISSING:
    raise RuntimeError(f"Schemas without a registered model: {_MISSING}")


def get_schema(name: SchemaName) -> Type[BaseModel]:
    try:
        return _REGISTRY[SchemaName(name)]
    except (KeyError, ValueError) as e:
        raise SchemaNotFoundError(f"No schema registered under {name!r}") from e


def _field_errors(model: Type[BaseModel], exc: PydanticValidationError) -> List[Dict[str, str]]:
    field_messages: Dict[str, str] = getattr(model, "field_messages", {})
    required_messages: Dict[str, str] = getattr(model, "required_messages", {})

    fields: List[Dict[str, str]] = []
    seen = set()
    for error in exc.errors():
        loc = error.get("loc") or ()
        if not loc:
            # Model-level failure: the payload itself is not an object
            param = ""
            message = NOT_AN_OBJECT_MESSAGE
        else:
            param = str(loc[0])
            if error["type"] == "missing":
                message = required_messages.get(param, error["msg"])
            else:
                message = field_messages.get(param, error["msg"])
        if param in seen:
            continue
        seen.add(param)
        fields.append({"location": "body", "param": param, "message": message})
    return fields


def validate(name: SchemaName, payload: Any) -> BaseModel:
    """
    Validate payload against the schema registered under name.

    Returns:
        The validated model instance (unknown properties dropped).

    Raises:
        SchemaNotFoundError:    name has no registered model
        ValidationFailedError:  one entry per invalid property
    """
    model = get_schema(name)
    if not isinstance(payload, dict):
        raise ValidationFailedError(
            [{"location": "body", "param": "", "message": NOT_AN_OBJECT_MESSAGE}]
        )
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        fields = _field_errors(model, e)
        logger.debug("Payload rejected by %s schema: %s", SchemaName(name).value, fields)
        raise ValidationFailedError(fields) from e


def validate_id_parameter(value: Any) -> str:
    """Returns value unchanged when it is a well-formed record identifier."""
    if not is_object_id(value):
        raise ValidationFailedError(
            [{"location": "params", "param": "id", "message": INVALID_ID_MESSAGE}]
        )
    return value
