"""
HotTakes API: String Formats
=============================

Reusable string formats for request schemas:
    - ObjectId:        24 hexadecimal characters (record identifiers)
    - StrongPassword:  minimum length and minimum counts of lowercase,
                       uppercase, digit and symbol characters, read from
                       settings (default 8/1/1/1/1)
Email addresses use pydantic's EmailStr (email-validator).
"""

import re
from typing import Annotated

from pydantic import AfterValidator

from hottakes.config import settings

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

# Characters counted as symbols by the password policy
PASSWORD_SYMBOLS = set("-#!$@£%^&*()_+|~=`{}[]:\";'<>?,./\\ ")


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def is_strong_password(
    value: str,
    min_length: int = 8,
    min_lowercase: int = 1,
    min_uppercase: int = 1,
    min_numbers: int = 1,
    min_symbols: int = 1,
) -> bool:
    if len(value) < min_length:
        return False
    lowercase = sum(1 for c in value if c.islower())
    uppercase = sum(1 for c in value if c.isupper())
    numbers = sum(1 for c in value if c.isdigit())
    symbols = sum(1 for c in value if c in PASSWORD_SYMBOLS)
    return (
        lowercase >= min_lowercase
        and uppercase >= min_uppercase
        and numbers >= min_numbers
        and symbols >= min_symbols
    )


def _check_object_id(value: str) -> str:
    if not is_object_id(value):
        raise ValueError("value is not a valid identifier")
    return value


def _check_strong_password(value: str) -> str:
    if not is_strong_password(
        value,
        min_length=settings.password_min_length,
        min_lowercase=settings.password_min_lowercase,
        min_uppercase=settings.password_min_uppercase,
        min_numbers=settings.password_min_numbers,
        min_symbols=settings.password_min_symbols,
    ):
        raise ValueError("password is not strong enough")
    return value


ObjectId = Annotated[str, AfterValidator(_check_object_id)]
StrongPassword = Annotated[str, AfterValidator(_check_strong_password)]
