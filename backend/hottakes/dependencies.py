"""
HotTakes API: Route Dependencies
=================================

What:  FastAPI dependencies shared by the protected routers.
       - get_request_context: bearer authentication → RequestContext
       - require_content_type: rejects bodies of an unaccepted media type
Who:   Declared on routes in routes/sauces.py and routes/auth.py.

Create and the auth routes declare require_content_type after
authentication, so an anonymous caller always gets 401. Update and vote
call check_content_type from the handler instead, once the id (and, for
update, ownership) has been checked.
"""

from typing import Optional

from fastapi import Header, Request

from hottakes.config import settings
from hottakes.context import RequestContext
from hottakes.exceptions import UnsupportedMediaTypeError
from hottakes.services.auth_service import authenticate


async def get_request_context(
    authorization: Optional[str] = Header(default=None),
) -> RequestContext:
    return authenticate(authorization, settings)


def is_accepted_content_type(content_type: Optional[str]) -> bool:
    """An absent header is accepted; otherwise the media type must be listed."""
    if not content_type:
        return True
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in settings.allowed_content_types


def check_content_type(content_type: Optional[str]) -> None:
    """Raise UnsupportedMediaTypeError unless the media type is accepted."""
    if not is_accepted_content_type(content_type):
        raise UnsupportedMediaTypeError(
            f"Unsupported Content-Type '{content_type}'. "
            f"Accepted: {', '.join(settings.allowed_content_types)}",
            context={"content_type": content_type},
        )


async def require_content_type(request: Request) -> None:
    check_content_type(request.headers.get("content-type"))
