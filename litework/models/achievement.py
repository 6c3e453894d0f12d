"""Earned achievement badges."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from litework.core.enums import AchievementType
from litework.db.base import Base


class Achievement(Base):
    """A badge earned by an athlete. Each type is earned at most once."""

    __tablename__ = "athlete_achievements"
    __table_args__ = (UniqueConstraint("athlete_id", "achievement_type", name="uq_athlete_achievement_type"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    athlete_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    achievement_type: Mapped[AchievementType] = mapped_column(Enum(AchievementType), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
