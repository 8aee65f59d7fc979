"""Create users and sauces tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema: `users` (accounts) and `sauces` (reviews with their
       vote state).
How:   Identifiers are 24-character hex strings generated by the
       application; the liked/disliked user sets are JSON arrays.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "password",
            sa.Text(),
            nullable=False,
            comment="bcrypt hash of the password",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sauces",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column(
            "user_id",
            sa.String(24),
            nullable=False,
            comment="Owner: the user who submitted the sauce",
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("manufacturer", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("main_pepper", sa.String(255), nullable=False),
        sa.Column(
            "image_url",
            sa.String(1024),
            nullable=False,
            comment="Absolute URL of the image under /images/",
        ),
        sa.Column("heat", sa.Integer(), nullable=False),
        sa.Column("likes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("dislikes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "users_liked",
            sa.JSON(),
            nullable=False,
            comment="Ids of the users who like the sauce",
        ),
        sa.Column(
            "users_disliked",
            sa.JSON(),
            nullable=False,
            comment="Ids of the users who dislike the sauce",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint("heat >= 1 AND heat <= 10", name="ck_sauces_heat_range"),
        sa.CheckConstraint("likes >= 0 AND dislikes >= 0", name="ck_sauces_vote_counts"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sauces_user_id", "sauces", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_sauces_user_id", table_name="sauces")
    op.drop_table("sauces")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
