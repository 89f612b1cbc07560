"""Notification and notification preference models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, Index, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.collab.models.base import utc_now


class Notification(SQLModel, table=True):
    """In-app notification for a single recipient.

    Only the dispatcher creates rows; only the recipient marks them read or
    soft-deletes them. ``project_id`` lets project deletion remove them.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    recipient_id: UUID = Field(index=True)
    category: str = Field(max_length=50)
    content: str = Field(max_length=1000)
    payload: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", JSONB, nullable=False, server_default="{}"),
    )
    project_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            Uuid,
            ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
    )
    is_read: bool = Field(default=False)
    deleted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class NotificationPreference(SQLModel, table=True):
    """Per-principal delivery toggles. Absent row means every toggle is on."""

    __tablename__ = "notification_preferences"

    user_id: UUID = Field(primary_key=True)
    email_enabled: bool = Field(default=True)
    in_app_enabled: bool = Field(default=True)
    project_sharing: bool = Field(default=True)
    comments: bool = Field(default=True)
    team_invitations: bool = Field(default=True)
    system_announcements: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
