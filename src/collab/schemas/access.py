"""Project sharing schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr


class GrantCreate(BaseModel):
    """Share a project with a user identified by email address."""

    email: EmailStr
    access_level: Literal["view", "edit"] = "view"


class GrantUpsertResponse(BaseModel):
    grant_id: UUID
    updated: bool
    message: str


class GrantRead(BaseModel):
    """A grant with the grantee's display data."""

    id: UUID
    project_id: UUID
    user_id: UUID
    access_level: str
    display_name: str
    email: str | None
    created_at: datetime
    updated_at: datetime
