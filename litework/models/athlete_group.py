"""Athlete groups (teams/squads) managed by a coach."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litework.core.constants import DEFAULT_GROUP_COLOR
from litework.db.base import Base


class AthleteGroup(Base):
    """e.g. "Football Linemen" (sport=Football, category=Linemen)."""

    __tablename__ = "athlete_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sport: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_GROUP_COLOR)
    coach_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    members: Mapped[list["AthleteGroupMember"]] = relationship(
        "AthleteGroupMember", back_populates="group", cascade="all, delete-orphan"
    )

    @property
    def athlete_ids(self) -> list[uuid.UUID]:
        return [m.athlete_id for m in self.members]


class AthleteGroupMember(Base):
    __tablename__ = "athlete_group_members"
    __table_args__ = (UniqueConstraint("group_id", "athlete_id", name="uq_group_member"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("athlete_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    athlete_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    group: Mapped["AthleteGroup"] = relationship("AthleteGroup", back_populates="members")
