"""
HotTakes API: Authentication Unit Tests
========================================

What:  Bearer header parsing, token verification and error kinds.
How:   Tokens are signed with PyJWT in the tests, with the same secret,
       issuer and audience as the application settings.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from hottakes.config import settings
from hottakes.exceptions import AuthenticationError, ErrorKind
from hottakes.services.auth_service import (
    authenticate,
    create_access_token,
    hash_password,
    verify_password,
)

USER_ID = "64b7f0c2e4b0a1a2b3c4d5e6"


def sign(claims, secret=None):
    base = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    base.update(claims)
    return jwt.encode(base, secret or settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


class TestAuthenticate:
    def test_valid_token(self):
        ctx = authenticate(f"Bearer {create_access_token(USER_ID)}")
        assert ctx.user_id == USER_ID
        assert ctx.sauce is None

    def test_scheme_is_case_insensitive(self):
        ctx = authenticate(f"bearer {create_access_token(USER_ID)}")
        assert ctx.user_id == USER_ID

    @pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer", "Bearer   "])
    def test_missing_bearer(self, header):
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(header)
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION_MISSING
        assert exc_info.value.status == 401

    def test_wrong_signature(self):
        token = sign({"userId": USER_ID}, secret="another-secret-that-is-long-enough-too")
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(f"Bearer {token}")
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION_INVALID

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate("Bearer not.a.token")
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION_INVALID

    def test_wrong_audience(self):
        token = sign({"userId": USER_ID, "aud": "someone-else"})
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(f"Bearer {token}")
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION_INVALID

    def test_expired_token_reports_expiry(self):
        expired_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
        token = sign({"userId": USER_ID, "iat": expired_at - timedelta(hours=1), "exp": expired_at})
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(f"Bearer {token}")
        error = exc_info.value
        assert error.kind is ErrorKind.TOKEN_EXPIRED
        assert error.to_dict()["expiredAt"] == expired_at.isoformat()

    def test_token_not_active_yet(self):
        not_before = datetime.now(timezone.utc) + timedelta(hours=1)
        token = sign({"userId": USER_ID, "nbf": not_before, "exp": not_before + timedelta(hours=1)})
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(f"Bearer {token}")
        error = exc_info.value
        assert error.kind is ErrorKind.TOKEN_NOT_ACTIVE
        assert error.to_dict()["date"] is not None

    @pytest.mark.parametrize("claims", [{}, {"userId": ""}, {"userId": 42}])
    def test_malformed_subject(self, claims):
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(f"Bearer {sign(claims)}")
        assert exc_info.value.kind is ErrorKind.MALFORMED_SUBJECT


class TestTokens:
    def test_token_claims(self):
        token = create_access_token(USER_ID)
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
        assert claims["userId"] == USER_ID
        assert claims["exp"] - claims["iat"] == settings.token_ttl_hours * 3600


class TestPasswords:
    def test_hash_and_verify(self):
        password_hash = hash_password("Sup3r-secret")
        assert password_hash != "Sup3r-secret"
        assert verify_password("Sup3r-secret", password_hash)
        assert not verify_password("wrong-Passw0rd", password_hash)

    def test_unrecognised_hash(self):
        assert verify_password("Sup3r-secret", "plain-text") is False
