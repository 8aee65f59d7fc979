"""
HotTakes API: Sauce Routes
===========================

What:  The /api/reviews endpoints (CRUD + vote).
How:   Thin handlers: a dependency authenticates the caller, the content
       type is filtered before any body is read (after the id checks on
       update and vote), then every pipeline stage is delegated to
       SauceService.
Who:   Called by the front-end sauce pages.

Endpoints:
    GET    /api/reviews            → list all sauces
    GET    /api/reviews/{id}       → one sauce
    POST   /api/reviews            → create (multipart: sauce + image)
    PUT    /api/reviews/{id}       → update (JSON, or multipart with image)
    DELETE /api/reviews/{id}       → delete
    POST   /api/reviews/{id}/vote  → like / dislike / reset
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hottakes.context import RequestContext
from hottakes.database import get_db_session
from hottakes.dependencies import check_content_type, get_request_context, require_content_type
from hottakes.routes.payload import read_json, read_sauce_form, read_sauce_payload
from hottakes.schemas.common import ErrorResponse
from hottakes.schemas.sauce import MessageResponse, SauceResponse, VoteResponse
from hottakes.services.sauce_repository import SauceRepository
from hottakes.services.sauce_service import SauceService
from hottakes.services.validation import validate_id_parameter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Sauces"])

# Decorator dependencies run first and in order; the handler's own
# Depends(get_request_context) then reuses the cached context. Update and
# vote check the content type in the handler, after the id checks.
AUTHENTICATED_BODY = [Depends(get_request_context), Depends(require_content_type)]

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
}
ID_RESPONSES = {
    **AUTH_RESPONSES,
    400: {"description": "Invalid identifier or payload", "model": ErrorResponse},
    404: {"description": "Sauce not found", "model": ErrorResponse},
}
OWNER_RESPONSES = {
    **ID_RESPONSES,
    403: {"description": "The sauce belongs to another user", "model": ErrorResponse},
}


def get_sauce_service(db: AsyncSession = Depends(get_db_session)) -> SauceService:
    return SauceService(SauceRepository(db))


@router.get(
    "",
    response_model=List[SauceResponse],
    responses=AUTH_RESPONSES,
    summary="List all sauces",
)
async def list_sauces(
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> List[SauceResponse]:
    sauces = await service.list_sauces(ctx)
    return [SauceResponse.model_validate(sauce) for sauce in sauces]


@router.get(
    "/{sauce_id}",
    response_model=SauceResponse,
    responses=ID_RESPONSES,
    summary="Get one sauce",
)
async def get_sauce(
    sauce_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> SauceResponse:
    sauce = await service.get_sauce(ctx, sauce_id)
    return SauceResponse.model_validate(sauce)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    dependencies=AUTHENTICATED_BODY,
    responses={
        **AUTH_RESPONSES,
        400: {"description": "Invalid payload or image", "model": ErrorResponse},
        415: {"description": "Unsupported Content-Type", "model": ErrorResponse},
    },
    summary="Create a sauce",
    description=(
        "multipart/form-data with a `sauce` field holding the sauce as a JSON "
        "string and an `image` file field (jpg, png, webp or avif)."
    ),
)
async def create_sauce(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> MessageResponse:
    payload, image = await read_sauce_form(request)
    try:
        return await service.create_sauce(ctx, payload, image, str(request.base_url))
    finally:
        if image is not None:
            await image.close()


@router.put(
    "/{sauce_id}",
    response_model=MessageResponse,
    responses={
        **OWNER_RESPONSES,
        415: {"description": "Unsupported Content-Type", "model": ErrorResponse},
    },
    summary="Update a sauce",
    description=(
        "JSON body with the fields to change, or multipart/form-data with an "
        "optional `sauce` JSON field and an optional new `image`."
    ),
)
async def update_sauce(
    sauce_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> MessageResponse:
    ctx = await service.authorize(ctx, sauce_id)
    check_content_type(request.headers.get("content-type"))
    payload, image = await read_sauce_payload(request, default={})
    try:
        return await service.update_sauce(
            ctx, payload, image, str(request.base_url), background_tasks
        )
    finally:
        if image is not None:
            await image.close()


@router.delete(
    "/{sauce_id}",
    response_model=MessageResponse,
    responses=OWNER_RESPONSES,
    summary="Delete a sauce",
)
async def delete_sauce(
    sauce_id: str,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> MessageResponse:
    ctx = await service.authorize(ctx, sauce_id)
    return await service.delete_sauce(ctx, background_tasks)


@router.post(
    "/{sauce_id}/vote",
    response_model=VoteResponse,
    responses={
        **ID_RESPONSES,
        415: {"description": "Unsupported Content-Type", "model": ErrorResponse},
    },
    summary="Like, dislike or reset a vote",
    description="JSON body {like: 1 | 0 | -1}. The voter is the authenticated user.",
)
async def vote(
    sauce_id: str,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    service: SauceService = Depends(get_sauce_service),
) -> VoteResponse:
    validate_id_parameter(sauce_id)
    check_content_type(request.headers.get("content-type"))
    payload = await read_json(request)
    return await service.vote(ctx, sauce_id, payload)
