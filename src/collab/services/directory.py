"""Identity/profile directory.

Resolves contact addresses to principals and principals to display data.
Backed by the ``profiles`` table that the identity provider keeps in sync.
"""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from src.collab.repositories import ProfileRepository

UNKNOWN_DISPLAY_NAME = "Someone"


class IdentityDirectory(Protocol):
    """Lookups the core needs from the identity collaborator."""

    async def resolve_principal_by_contact(self, contact: str) -> UUID | None: ...

    async def get_display_name(self, principal_id: UUID) -> str: ...

    async def get_contact_address(self, principal_id: UUID) -> str | None: ...

    async def get_display_names(self, principal_ids: Iterable[UUID]) -> dict[UUID, str]: ...

    async def existing_principals(self, principal_ids: Iterable[UUID]) -> set[UUID]: ...


class ProfileDirectory:
    """IdentityDirectory implementation over ProfileRepository."""

    def __init__(self, profile_repo: ProfileRepository):
        self.profile_repo = profile_repo

    async def resolve_principal_by_contact(self, contact: str) -> UUID | None:
        profile = await self.profile_repo.get_by_email(contact)
        return profile.id if profile else None

    async def get_display_name(self, principal_id: UUID) -> str:
        profile = await self.profile_repo.get_by_id(principal_id)
        return profile.name_for_display if profile else UNKNOWN_DISPLAY_NAME

    async def get_contact_address(self, principal_id: UUID) -> str | None:
        profile = await self.profile_repo.get_by_id(principal_id)
        return profile.email if profile else None

    async def get_display_names(self, principal_ids: Iterable[UUID]) -> dict[UUID, str]:
        ids = list(principal_ids)
        profiles = await self.profile_repo.get_many(ids)
        return {
            pid: profiles[pid].name_for_display if pid in profiles else UNKNOWN_DISPLAY_NAME
            for pid in ids
        }

    async def existing_principals(self, principal_ids: Iterable[UUID]) -> set[UUID]:
        profiles = await self.profile_repo.get_many(principal_ids)
        return set(profiles)
