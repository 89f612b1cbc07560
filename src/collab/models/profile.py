"""Profile model - the identity directory's view of a principal."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.collab.models.base import utc_now


class Profile(SQLModel, table=True):
    """Public profile of a principal.

    ``id`` is the principal id issued by the identity provider; rows are
    written by the provider's sync hook, never by this service.
    """

    __tablename__ = "profiles"

    id: UUID = Field(primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    display_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def name_for_display(self) -> str:
        if self.display_name:
            return self.display_name
        return self.email.split("@", 1)[0]
