"""
HotTakes API: Request Body Parsing
===================================

What:  Turns the raw request body into (payload, image) for the services.
How:   multipart/form-data bodies carry the sauce as a JSON string in the
       `sauce` field and the file in the `image` field; any other body is
       read as JSON. Schema validation happens later, in the services, so
       these helpers only reject bodies that cannot be parsed at all.
       Sauce bodies (create and update) are sanitized on the way out:
       every blacklisted string (settings.payload_sanitization) is removed
       from every string value, case-insensitively and at any depth.
"""

import json
import re
from typing import Any, Iterable, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from hottakes.config import settings
from hottakes.exceptions import ValidationFailedError

SAUCE_FIELD = "sauce"
IMAGE_FIELD = "image"


def _invalid_json(param: str) -> ValidationFailedError:
    return ValidationFailedError(
        [{"location": "body", "param": param, "message": "The value must be valid JSON"}],
    )


def is_multipart(request: Request) -> bool:
    return request.headers.get("content-type", "").lower().startswith("multipart/form-data")


def sanitize_payload(value: Any, blacklist: Optional[Iterable[str]] = None) -> Any:
    """
    Copy of value with every blacklisted string removed from its strings.

    Dicts and lists are walked recursively (keys are left alone); any other
    value is returned unchanged. blacklist defaults to
    settings.payload_sanitization.
    """
    if blacklist is None:
        blacklist = settings.payload_sanitization
    patterns = [re.compile(re.escape(s), re.IGNORECASE) for s in blacklist if s]
    return _sanitize(value, patterns)


def _sanitize(value: Any, patterns: list) -> Any:
    if isinstance(value, str):
        for pattern in patterns:
            value = pattern.sub("", value)
        return value
    if isinstance(value, dict):
        return {key: _sanitize(item, patterns) for key, item in value.items()}
    if isinstance(value, list):
        return [_sanitize(item, patterns) for item in value]
    return value


async def read_json(request: Request) -> Any:
    """Parsed JSON body; an empty body reads as {}."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise _invalid_json("") from e


async def read_sauce_form(request: Request, default: Any = None) -> Tuple[Any, Optional[UploadFile]]:
    """
    Read a multipart sauce submission.

    Returns:
        (payload, image). payload is the sanitized `sauce` field, or
        `default` when it is absent; image is None when no file was sent.
    """
    form = await request.form()
    raw = form.get(SAUCE_FIELD)
    payload = default
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise _invalid_json(SAUCE_FIELD) from e

    image = form.get(IMAGE_FIELD)
    if not isinstance(image, UploadFile):
        image = None
    return sanitize_payload(payload), image


async def read_sauce_payload(request: Request, default: Any = None) -> Tuple[Any, Optional[UploadFile]]:
    """Multipart or JSON, whichever the request carries."""
    if is_multipart(request):
        return await read_sauce_form(request, default)
    return sanitize_payload(await read_json(request)), None
