"""Project, tool and comment schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _strip_required(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} cannot be empty or whitespace only")
    return v


class ProjectCreate(BaseModel):
    """Schema for creating a project. Name and description are both required."""

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=1000)
    url: str | None = Field(default=None, max_length=2048)
    tool_ids: list[UUID] = Field(default_factory=list)
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Project name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _strip_required(v, "Project description")


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    url: str | None = Field(default=None, max_length=2048)
    is_public: bool | None = None

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _strip_required(v, "Project name") if v is not None else v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_required(v, "Project description") if v is not None else v


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    owner_id: UUID
    name: str
    description: str
    url: str | None
    tool_ids: list[UUID]
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccessibleProjectRead(ProjectRead):
    """Project as listed for a principal, tagged owned or shared."""

    is_shared: bool
    access_level: str | None = None


class ToolRead(BaseModel):
    id: UUID
    name: str
    type: str
    description: str | None
    icon: str | None

    model_config = {"from_attributes": True}


class ToolsUpdate(BaseModel):
    """Replace a project's tool references."""

    tool_ids: list[UUID] = Field(max_length=50)


class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=5000)

    @field_validator("body")
    @classmethod
    def validate_body(cls, v: str) -> str:
        return _strip_required(v, "Comment")


class CommentRead(BaseModel):
    id: UUID
    project_id: UUID
    author_id: UUID
    author_name: str | None = None
    body: str
    created_at: datetime

    model_config = {"from_attributes": True}
