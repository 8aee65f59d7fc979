"""
HotTakes API: Sauce SQLAlchemy Model
=====================================

What:  ORM model representing the `sauces` table (the review record).
Who:   Used by SauceRepository for CRUD operations and by Alembic.

Table Design:
    - id: 24-character hex string generated in Python (same shape as the
      identifiers clients already store)
    - user_id: owner, the authenticated submitter; compared by the
      ownership check on update/delete
    - heat: 1..10, enforced by a CHECK constraint in addition to input
      validation
    - likes/dislikes + users_liked/users_disliked: the vote state. The
      lists are JSON arrays of user ids. Only the voting engine writes
      them, and it keeps likes == len(users_liked) and
      dislikes == len(users_disliked)
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, CheckConstraint, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from hottakes.database import Base, generate_object_id
from hottakes.services.voting import VoteState


class Sauce(Base):
    """
    A reviewed sauce.

    Lifecycle:
        1. Created on submission (vote state empty)
        2. Descriptive fields and image replaced by update (vote state untouched)
        3. Vote state replaced by vote actions (descriptive fields untouched)
        4. Deleted together with its image file
    """

    __tablename__ = "sauces"

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=generate_object_id,
    )
    user_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    manufacturer: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    main_pepper: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    heat: Mapped[int] = mapped_column(Integer, nullable=False)

    # ── Vote State ────────────────────────────────────────────────────────
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    users_liked: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    users_disliked: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("heat >= 1 AND heat <= 10", name="ck_sauces_heat_range"),
        CheckConstraint("likes >= 0 AND dislikes >= 0", name="ck_sauces_vote_counts"),
    )

    @property
    def vote_state(self) -> VoteState:
        """Snapshot of the vote columns as an immutable value."""
        return VoteState(
            likes=self.likes or 0,
            dislikes=self.dislikes or 0,
            users_liked=tuple(self.users_liked or ()),
            users_disliked=tuple(self.users_disliked or ()),
        )

    def apply_vote_state(self, state: VoteState) -> None:
        """
        Writes a vote state back onto the mapped columns.

        New list objects are assigned (never mutated in place) so the JSON
        columns are flagged dirty by the unit of work.
        """
        self.likes = state.likes
        self.dislikes = state.dislikes
        self.users_liked = list(state.users_liked)
        self.users_disliked = list(state.users_disliked)

    def __repr__(self) -> str:
        return f"<Sauce(id={self.id}, name='{self.name}', user_id='{self.user_id}')>"
