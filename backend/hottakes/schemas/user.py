"""
HotTakes API: User Request/Response Schemas
============================================

What:  Credentials accepted by signup and login, and the login response.
How:   Same conventions as the sauce request models (strict types, unknown
       properties dropped, one message per field). Signup requires a strong
       password; login only requires a string, so an account created under
       an older password policy can still log in.
"""

from typing import ClassVar, Dict

from pydantic import AliasGenerator, BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from hottakes.config import settings
from hottakes.schemas.formats import StrongPassword


class Credentials(BaseModel):
    """Body of POST /api/auth/signup."""

    email: EmailStr
    password: StrongPassword

    model_config = ConfigDict(extra="ignore", strict=True)

    field_messages: ClassVar[Dict[str, str]] = {
        "email": "The email must be a string containing a valid email address",
        "password": (
            "The password must be a string containing a strong password: "
            + settings.password_policy_description
        ),
    }
    required_messages: ClassVar[Dict[str, str]] = {
        "email": "The payload must contain the user email",
        "password": "The payload must contain a strong password",
    }


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(extra="ignore", strict=True)

    field_messages: ClassVar[Dict[str, str]] = {
        "email": "The email must be a string containing a valid email address",
        "password": "The password must be a string",
    }
    required_messages: ClassVar[Dict[str, str]] = {
        "email": "The payload must contain the user email",
        "password": "The payload must contain the user password",
    }


class LoginResponse(BaseModel):
    user_id: str
    token: str

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel))
