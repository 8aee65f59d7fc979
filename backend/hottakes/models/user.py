"""
HotTakes API: User SQLAlchemy Model
====================================

What:  ORM model for the `users` table.
Who:   Used by UserRepository for signup and login.

The password column stores a bcrypt hash, never the plain password.
The unique index on email is what rejects a second signup with the same
address (surfaced as a 400 by the repository).
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from hottakes.database import Base, generate_object_id


class User(Base):
    """A registered user. Created on signup, read on login."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_object_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
