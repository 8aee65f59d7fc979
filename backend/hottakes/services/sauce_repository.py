"""
HotTakes API: Persistence Store
================================

What:  Async data access for sauces and users.
How:   Thin wrappers over an AsyncSession. Every driver error is translated
       into the error taxonomy before it leaves this module:

           malformed identifier           → MalformedIdentifierError (400)
           IntegrityError / DataError     → ValidationFailedError (400)
           record absent (get)            → NotFoundError (404)
           any other SQLAlchemyError      → PersistenceError (500)

Who:   SauceService and UserService. One repository per request session.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hottakes.exceptions import (
    MalformedIdentifierError,
    NotFoundError,
    PersistenceError,
    ValidationFailedError,
)
from hottakes.models.sauce import Sauce
from hottakes.models.user import User
from hottakes.schemas.formats import is_object_id

logger = logging.getLogger(__name__)


@asynccontextmanager
async def translate_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (IntegrityError, DataError) as e:
        logger.warning("Constraint violation during %s: %s", operation, e.orig)
        raise ValidationFailedError(
            [{"location": "body", "param": "", "message": "The record violates a storage constraint"}],
            message="The record could not be saved",
            context={"operation": operation, "error": str(e.orig)},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, e, exc_info=True)
        raise PersistenceError(context={"operation": operation, "error_type": type(e).__name__}) from e


class SauceRepository:
    """CRUD over the sauces table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self) -> List[Sauce]:
        async with translate_errors("list sauces"):
            result = await self.session.execute(select(Sauce).order_by(Sauce.created_at))
            return list(result.scalars().all())

    async def find_by_id(self, sauce_id: str) -> Optional[Sauce]:
        if not is_object_id(sauce_id):
            raise MalformedIdentifierError(
                f"'{sauce_id}' is not a valid sauce identifier",
                context={"sauce_id": sauce_id},
            )
        async with translate_errors("find sauce"):
            return await self.session.get(Sauce, sauce_id.lower())

    async def get(self, sauce_id: str) -> Sauce:
        """Like find_by_id, but a missing record raises NotFoundError."""
        sauce = await self.find_by_id(sauce_id)
        if sauce is None:
            raise NotFoundError(resource="Sauce", resource_id=sauce_id)
        return sauce

    async def insert(self, sauce: Sauce) -> Sauce:
        async with translate_errors("insert sauce"):
            self.session.add(sauce)
            await self.session.flush()
        logger.info("Sauce %s created by user %s", sauce.id, sauce.user_id)
        return sauce

    async def update_fields(self, sauce: Sauce, fields: Dict[str, Any]) -> Sauce:
        async with translate_errors("update sauce"):
            for name, value in fields.items():
                setattr(sauce, name, value)
            await self.session.flush()
        return sauce

    async def delete(self, sauce: Sauce) -> None:
        async with translate_errors("delete sauce"):
            await self.session.delete(sauce)
            await self.session.flush()
        logger.info("Sauce %s deleted", sauce.id)

    async def commit(self) -> None:
        async with translate_errors("commit"):
            await self.session.commit()


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        async with translate_errors("find user"):
            result = await self.session.execute(
                select(User).where(User.email == email.lower())
            )
            return result.scalar_one_or_none()

    async def insert(self, user: User) -> User:
        async with translate_errors("insert user"):
            self.session.add(user)
            await self.session.flush()
        logger.info("User %s signed up", user.id)
        return user

    async def commit(self) -> None:
        async with translate_errors("commit"):
            await self.session.commit()
