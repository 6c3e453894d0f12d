"""Workout block - reusable library bundle of exercises and groups (warm-up, core finisher...)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from litework.core.enums import BlockCategory
from litework.db.base import Base, JSONType


class WorkoutBlock(Base):
    """Exercises and groups are stored as JSON in the same shape plans accept on create."""

    __tablename__ = "workout_blocks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[BlockCategory] = mapped_column(
        Enum(BlockCategory), nullable=False, default=BlockCategory.CUSTOM
    )
    exercises: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    groups: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=10)  # minutes
    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
