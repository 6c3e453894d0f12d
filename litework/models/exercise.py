"""Exercise model - shared exercise library."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from litework.db.base import Base, JSONType


class Exercise(Base):
    """Exercise definition. Names are unique; lookups are case-insensitive."""

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="strength", index=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    target_muscle_groups: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    instructions: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
