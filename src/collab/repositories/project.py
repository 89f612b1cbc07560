"""Repositories for projects, tools and comments."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select

from src.collab.models import Project, ProjectAccess, ProjectComment, Tool
from src.collab.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    async def list_owned(self, owner_id: UUID) -> list[Project]:
        """Projects owned by a principal, newest first."""
        result = await self.session.execute(
            select(Project)
            .where(Project.owner_id == owner_id)
            .order_by(col(Project.created_at).desc())
        )
        return list(result.scalars().all())

    async def list_shared_with(self, user_id: UUID) -> list[tuple[Project, ProjectAccess]]:
        """Projects granted to a principal with the grant row, newest project first."""
        result = await self.session.execute(
            select(Project, ProjectAccess)
            .join(ProjectAccess, col(ProjectAccess.project_id) == col(Project.id))
            .where(ProjectAccess.user_id == user_id)
            .order_by(col(Project.created_at).desc())
        )
        return [(project, grant) for project, grant in result.all()]


class ToolRepository(BaseRepository[Tool]):
    """Repository for the tool catalogue."""

    model = Tool

    async def list_all(self) -> list[Tool]:
        """All tools ordered by name."""
        result = await self.session.execute(select(Tool).order_by(col(Tool.name)))
        return list(result.scalars().all())

    async def get_many(self, ids: Iterable[UUID]) -> list[Tool]:
        id_list = list(set(ids))
        if not id_list:
            return []
        result = await self.session.execute(select(Tool).where(col(Tool.id).in_(id_list)))
        return list(result.scalars().all())


class CommentRepository(BaseRepository[ProjectComment]):
    """Repository for project comments."""

    model = ProjectComment

    async def list_by_project(
        self, project_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[ProjectComment], str | None, bool]:
        """List comments on a project with cursor-based pagination."""
        query = select(ProjectComment).where(ProjectComment.project_id == project_id)
        return await self.paginate(query, cursor, limit)

    async def delete_by_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            delete(ProjectComment).where(col(ProjectComment.project_id) == project_id)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
