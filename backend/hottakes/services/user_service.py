"""
HotTakes API: User Service
===========================

What:  Signup and login.
How:   Credentials are validated, passwords hashed with bcrypt, and a
       signed token is issued on a successful login.
Who:   Called by routes/auth.py.
"""

import logging
from typing import Any

from hottakes.exceptions import AuthenticationError, ValidationFailedError
from hottakes.models.user import User
from hottakes.schemas.sauce import MessageResponse
from hottakes.schemas.user import Credentials, LoginRequest, LoginResponse
from hottakes.services.auth_service import create_access_token, hash_password, verify_password
from hottakes.services.sauce_repository import UserRepository
from hottakes.services.validation import SchemaName, validate

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Incorrect email or password"


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def signup(self, payload: Any) -> MessageResponse:
        """
        Register a new user.

        Raises:
            ValidationFailedError: invalid credentials, or the email is taken
        """
        data: Credentials = validate(SchemaName.CREDENTIALS, payload)
        email = data.email.lower()

        if await self.repository.find_by_email(email) is not None:
            raise ValidationFailedError(
                [{"location": "body", "param": "email", "message": "This email address is already registered"}],
            )

        await self.repository.insert(User(email=email, password=hash_password(data.password)))
        await self.repository.commit()
        return MessageResponse(message="New user created!")

    async def login(self, payload: Any) -> LoginResponse:
        """
        Exchange credentials for a token.

        Unknown email and wrong password give the same 401, so the response
        does not reveal which accounts exist.
        """
        data: LoginRequest = validate(SchemaName.LOGIN, payload)
        user = await self.repository.find_by_email(data.email)

        if user is None or not verify_password(data.password, user.password):
            logger.info("Failed login attempt for %s", data.email)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        return LoginResponse(user_id=user.id, token=create_access_token(user.id))
