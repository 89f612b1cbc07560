"""Notification and preference schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class NotificationPreferences(BaseModel):
    """Effective notification preferences. Every toggle defaults to enabled."""

    email_enabled: bool = True
    in_app_enabled: bool = True
    project_sharing: bool = True
    comments: bool = True
    team_invitations: bool = True
    system_announcements: bool = True

    model_config = {"from_attributes": True}


class PreferenceUpdate(BaseModel):
    """Partial preference update. Omitted toggles are left unchanged."""

    email_enabled: bool | None = None
    in_app_enabled: bool | None = None
    project_sharing: bool | None = None
    comments: bool | None = None
    team_invitations: bool | None = None
    system_announcements: bool | None = None

    model_config = {"extra": "forbid"}


class NotificationRead(BaseModel):
    """Schema for reading a notification."""

    id: UUID
    category: str
    content: str
    metadata: dict[str, Any] = Field(validation_alias="payload")
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    updated: int


class AnnouncementCreate(BaseModel):
    """System announcement broadcast to explicit recipients."""

    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=800)
    recipient_ids: list[UUID] = Field(min_length=1, max_length=1000)

    @field_validator("title", "message")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty or whitespace only")
        return v


class RecipientResultRead(BaseModel):
    recipient_id: UUID
    outcome: str
    notification_id: UUID | None = None
    email_sent: bool | None = None
    error_code: str | None = None
    reason: str | None = None


class DispatchResultRead(BaseModel):
    category: str
    results: list[RecipientResultRead]
