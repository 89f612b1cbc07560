"""Project, tool and comment models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, Index, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.collab.models.base import utc_now
from src.collab.models.enums import ToolType


class Project(SQLModel, table=True):
    """Project owned by a single principal.

    Grants live in ``project_access``; a project never embeds its grant list.
    """

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_owner_created", "owner_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(index=True)
    name: str = Field(max_length=200)
    description: str = Field(max_length=1000)
    url: str | None = Field(default=None, max_length=2048)
    tool_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    is_public: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Tool(SQLModel, table=True):
    """Catalogue entry a project can reference."""

    __tablename__ = "tools"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    type: str = Field(default=ToolType.UTILITY.value, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    icon: str | None = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectComment(SQLModel, table=True):
    """Comment left on a project by a principal with read access."""

    __tablename__ = "project_comments"
    __table_args__ = (Index("ix_project_comments_project_created", "project_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    )
    author_id: UUID
    body: str = Field(max_length=5000)
    created_at: datetime = Field(default_factory=utc_now)
