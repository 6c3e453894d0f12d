"""Achievements table, achievement notifications, hashed bearer tokens.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

achievement_type = sa.Enum(
    "FIRST_WORKOUT",
    "FIRST_PR",
    "STREAK_3",
    "STREAK_7",
    "STREAK_30",
    "VOLUME_10K",
    "VOLUME_50K",
    "VOLUME_100K",
    "SETS_100",
    "SETS_500",
    "SETS_1000",
    name="achievementtype",
)


def upgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("ALTER TYPE notificationtype ADD VALUE IF NOT EXISTS 'ACHIEVEMENT' BEFORE 'GENERAL'")

    op.create_table(
        "athlete_achievements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("achievement_type", achievement_type, nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["athlete_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("athlete_id", "achievement_type", name="uq_athlete_achievement_type"),
    )
    op.create_index(op.f("ix_athlete_achievements_athlete_id"), "athlete_achievements", ["athlete_id"])

    # Plaintext tokens cannot be converted; everyone signs in again
    op.execute("DELETE FROM auth_tokens")
    op.drop_index(op.f("ix_auth_tokens_token"), table_name="auth_tokens")
    op.drop_column("auth_tokens", "token")
    op.add_column("auth_tokens", sa.Column("token_hash", sa.String(length=64), nullable=False))
    op.create_index(op.f("ix_auth_tokens_token_hash"), "auth_tokens", ["token_hash"], unique=True)


def downgrade() -> None:
    op.execute("DELETE FROM auth_tokens")
    op.drop_index(op.f("ix_auth_tokens_token_hash"), table_name="auth_tokens")
    op.drop_column("auth_tokens", "token_hash")
    op.add_column("auth_tokens", sa.Column("token", sa.String(length=128), nullable=False))
    op.create_index(op.f("ix_auth_tokens_token"), "auth_tokens", ["token"], unique=True)

    op.drop_index(op.f("ix_athlete_achievements_athlete_id"), table_name="athlete_achievements")
    op.drop_table("athlete_achievements")
    achievement_type.drop(op.get_bind(), checkfirst=True)
    # PostgreSQL cannot drop an enum value; 'ACHIEVEMENT' stays on notificationtype
