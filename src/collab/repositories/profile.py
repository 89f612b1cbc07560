"""Repository for Profile entity."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.collab.models import Profile
from src.collab.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for principal profiles."""

    model = Profile

    async def get_by_email(self, email: str) -> Profile | None:
        """Get profile by contact address (case-insensitive)."""
        result = await self.session.execute(
            select(Profile).where(func.lower(Profile.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[UUID]) -> dict[UUID, Profile]:
        """Get profiles keyed by id. Unknown ids are absent from the result."""
        id_list = list(set(ids))
        if not id_list:
            return {}
        result = await self.session.execute(select(Profile).where(col(Profile.id).in_(id_list)))
        return {profile.id: profile for profile in result.scalars().all()}
