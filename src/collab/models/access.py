"""Project access grant model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlmodel import Field, SQLModel

from src.collab.models.base import utc_now
from src.collab.models.enums import AccessLevel

GRANT_PAIR_CONSTRAINT = "uq_project_access_project_user"


class ProjectAccess(SQLModel, table=True):
    """Grant of view/edit access on one project to one non-owner principal.

    The (project_id, user_id) unique constraint is what makes concurrent
    upserts safe: a losing insert fails instead of creating a duplicate.
    """

    __tablename__ = "project_access"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name=GRANT_PAIR_CONSTRAINT),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: UUID = Field(index=True)
    access_level: str = Field(default=AccessLevel.VIEW.value, max_length=10)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def level(self) -> AccessLevel:
        return AccessLevel(self.access_level)
