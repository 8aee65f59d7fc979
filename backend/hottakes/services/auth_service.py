"""
HotTakes API: Authentication Service
=====================================

What:  Password hashing, token issuance and bearer token verification.
How:   passlib (bcrypt) for passwords; PyJWT for tokens signed with the
       configured secret and carrying userId, iss, aud, iat and exp claims.
Who:   UserService (hash, verify, issue) and the authenticate dependency
       (verify on every protected route).

Verification failures map to the error taxonomy:
    no "Bearer <token>" header      → AUTHENTICATION_MISSING
    ExpiredSignatureError           → TOKEN_EXPIRED (expiredAt)
    ImmatureSignatureError          → TOKEN_NOT_ACTIVE (date)
    any other InvalidTokenError     → AUTHENTICATION_INVALID
    no non-empty string userId      → MALFORMED_SUBJECT
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from hottakes.config import Settings, settings as default_settings
from hottakes.context import RequestContext
from hottakes.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_PREFIX = "bearer "


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Stored value is not a recognised hash
        logger.warning("Password hash could not be identified")
        return False


def create_access_token(user_id: str, settings: Settings = default_settings) -> str:
    """Issues a signed token identifying user_id, valid for token_ttl_hours."""
    now = datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _claim_as_iso(token: str, claim: str) -> Optional[str]:
    """Reads a NumericDate claim from an already rejected token, as ISO-8601 UTC."""
    try:
        unverified = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    value = unverified.get(claim)
    if not isinstance(value, (int, float)):
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise AuthenticationError.missing()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError.missing()
    return token


def decode_token(token: str, settings: Settings = default_settings) -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError.expired(_claim_as_iso(token, "exp")) from e
    except jwt.ImmatureSignatureError as e:
        date = _claim_as_iso(token, "nbf") or _claim_as_iso(token, "iat")
        raise AuthenticationError.not_active(date) from e
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationError(context={"reason": str(e)}) from e


def authenticate(
    authorization: Optional[str], settings: Settings = default_settings
) -> RequestContext:
    """
    Resolve the Authorization header into the caller's identity.

    Raises:
        AuthenticationError: with one of the 401 kinds listed above
    """
    token = extract_bearer_token(authorization)
    claims = decode_token(token, settings)
    user_id = claims.get("userId")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError.malformed_subject()
    return RequestContext(user_id=user_id)
