"""
HotTakes API: Authentication Routes
====================================

POST /api/auth/signup → 201 {message}
POST /api/auth/login  → 200 {userId, token}
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hottakes.database import get_db_session
from hottakes.dependencies import require_content_type
from hottakes.routes.payload import read_json
from hottakes.schemas.common import ErrorResponse
from hottakes.schemas.sauce import MessageResponse
from hottakes.schemas.user import LoginResponse
from hottakes.services.sauce_repository import UserRepository
from hottakes.services.user_service import UserService

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
    dependencies=[Depends(require_content_type)],
)


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(UserRepository(db))


@router.post(
    "/signup",
    status_code=201,
    response_model=MessageResponse,
    responses={400: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Create an account",
)
async def signup(
    request: Request,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return await service.signup(await read_json(request))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid payload", "model": ErrorResponse},
        401: {"description": "Incorrect email or password", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    request: Request,
    service: UserService = Depends(get_user_service),
) -> LoginResponse:
    return await service.login(await read_json(request))
