"""Team schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Team name cannot be empty or whitespace only")
        return v


class TeamRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    creator_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class TeamListItem(TeamRead):
    """Team with the caller's role and the member count."""

    role: str
    member_count: int


class TeamInvitationCreate(BaseModel):
    email: EmailStr
    role: Literal["admin", "member"] = "member"


class TeamMemberRead(BaseModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}
