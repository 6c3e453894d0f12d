"""Notification inbox schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from litework.core.enums import NotificationType


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    type: NotificationType
    title: str
    body: str | None = None
    url: str | None = None
    data: dict | None = None
    read: bool
    created_at: datetime


class NotificationList(BaseModel):
    unread_count: int
    notifications: list[NotificationRead]
