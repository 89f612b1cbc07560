"""Grant store - repository for ProjectAccess rows."""

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from src.collab.core.errors import ConstraintViolation
from src.collab.models import AccessLevel, ProjectAccess
from src.collab.models.base import utc_now
from src.collab.repositories.base import BaseRepository


class ProjectAccessRepository(BaseRepository[ProjectAccess]):
    """Repository for project sharing grants.

    Uniqueness of (project_id, user_id) is enforced by the database, not here.
    """

    model = ProjectAccess

    async def get_by_pair(self, project_id: UUID, user_id: UUID) -> ProjectAccess | None:
        """Get the grant for a (project, grantee) pair."""
        result = await self.session.execute(
            select(ProjectAccess).where(
                ProjectAccess.project_id == project_id,
                ProjectAccess.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_level(self, project_id: UUID, user_id: UUID) -> AccessLevel | None:
        """Access level held by user_id on project_id, or None without a grant."""
        grant = await self.get_by_pair(project_id, user_id)
        return grant.level if grant else None

    async def list_by_project(self, project_id: UUID) -> list[ProjectAccess]:
        """All grants on a project, oldest first."""
        result = await self.session.execute(
            select(ProjectAccess)
            .where(ProjectAccess.project_id == project_id)
            .order_by(col(ProjectAccess.created_at))
        )
        return list(result.scalars().all())

    async def insert(self, project_id: UUID, user_id: UUID, level: AccessLevel) -> ProjectAccess:
        """Insert a new grant inside a savepoint.

        Raises:
            ConstraintViolation: a grant for the pair already exists (e.g. a
                concurrent upsert won the race). Only the savepoint is rolled
                back, so the caller can retry as an update.
        """
        grant = ProjectAccess(project_id=project_id, user_id=user_id, access_level=level.value)
        try:
            async with self.session.begin_nested():
                self.session.add(grant)
                await self.session.flush()
        except IntegrityError as e:
            raise ConstraintViolation(
                "A grant for this project and user already exists"
            ) from e
        return grant

    async def update_level(self, grant: ProjectAccess, level: AccessLevel) -> ProjectAccess:
        """Set a grant's level and touch updated_at."""
        grant.access_level = level.value
        grant.updated_at = utc_now()
        self.session.add(grant)
        await self.session.flush()
        return grant

    async def delete_by_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            delete(ProjectAccess).where(col(ProjectAccess.project_id) == project_id)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
