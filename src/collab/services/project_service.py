"""Project and tool catalogue service."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.access_policy import require_access
from src.collab.core.errors import NotFound
from src.collab.core.logging import get_logger
from src.collab.models import Operation, Project, Tool
from src.collab.models.base import utc_now
from src.collab.repositories import (
    CommentRepository,
    NotificationRepository,
    ProjectAccessRepository,
    ProjectRepository,
    ToolRepository,
)
from src.collab.schemas.project import ProjectCreate, ProjectUpdate
from src.collab.services.authorization import authorize_project

logger = get_logger(__name__)


class ProjectService:
    """Project CRUD. Every read and write goes through the access policy."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        access_repo: ProjectAccessRepository,
        tool_repo: ToolRepository,
        comment_repo: CommentRepository,
        notification_repo: NotificationRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.access_repo = access_repo
        self.tool_repo = tool_repo
        self.comment_repo = comment_repo
        self.notification_repo = notification_repo
        self.session = session

    async def _validated_tool_ids(self, tool_ids: Sequence[UUID]) -> list[str]:
        """Check every id is in the catalogue. Order is kept, duplicates dropped."""
        unique = list(dict.fromkeys(tool_ids))
        if not unique:
            return []
        found = {tool.id for tool in await self.tool_repo.get_many(unique)}
        missing = [str(tid) for tid in unique if tid not in found]
        if missing:
            raise NotFound(f"Unknown tool ids: {', '.join(missing)}")
        return [str(tid) for tid in unique]

    async def create_project(self, owner_id: UUID, data: ProjectCreate) -> Project:
        """Create a project owned by ``owner_id``.

        Raises:
            NotFound: a referenced tool is not in the catalogue.
        """
        tool_ids = await self._validated_tool_ids(data.tool_ids)
        project = Project(
            owner_id=owner_id,
            name=data.name,
            description=data.description,
            url=data.url,
            tool_ids=tool_ids,
            is_public=data.is_public,
        )
        try:
            self.project_repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create project", error=str(e))
            raise

        logger.info("Project created", project_id=str(project.id), owner_id=str(owner_id))
        return project

    async def get_project(self, project_id: UUID, principal_id: UUID) -> Project:
        project, _ = await authorize_project(
            project_id, principal_id, Operation.READ, self.project_repo, self.access_repo
        )
        return project

    async def update_project(
        self, project_id: UUID, principal_id: UUID, changes: ProjectUpdate
    ) -> Project:
        """Update project fields. Owner or edit grantee; visibility is owner-only.

        Raises:
            NotFound: project does not exist.
            Unauthorized: caller may not write, or may not change visibility.
        """
        project, facts = await authorize_project(
            project_id, principal_id, Operation.WRITE, self.project_repo, self.access_repo
        )
        partial = changes.model_dump(exclude_unset=True)

        if "is_public" in partial:
            if partial["is_public"] is None:
                del partial["is_public"]
            elif partial["is_public"] != project.is_public:
                require_access(principal_id, facts, Operation.MANAGE_GRANTS)

        for field in ("name", "description"):
            if field in partial and partial[field] is None:
                del partial[field]

        try:
            for field, value in partial.items():
                setattr(project, field, value)
            project.updated_at = utc_now()
            self.project_repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update project", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Project updated",
            project_id=str(project_id),
            updated_by=str(principal_id),
            fields=sorted(partial),
        )
        return project

    async def set_tools(
        self, project_id: UUID, principal_id: UUID, tool_ids: Sequence[UUID]
    ) -> Project:
        """Replace the project's tool references.

        Raises:
            NotFound: project does not exist, or a tool id is unknown.
            Unauthorized: caller may not write.
        """
        project, _ = await authorize_project(
            project_id, principal_id, Operation.WRITE, self.project_repo, self.access_repo
        )
        validated = await self._validated_tool_ids(tool_ids)

        try:
            project.tool_ids = validated
            project.updated_at = utc_now()
            self.project_repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to set project tools", project_id=str(project_id), error=str(e))
            raise

        logger.info("Project tools updated", project_id=str(project_id), count=len(validated))
        return project

    async def delete_project(self, project_id: UUID, principal_id: UUID) -> None:
        """Delete a project with its grants, comments and notifications. Owner only.

        Raises:
            NotFound: project does not exist.
            Unauthorized: caller is not the owner.
        """
        project, _ = await authorize_project(
            project_id, principal_id, Operation.DELETE, self.project_repo, self.access_repo
        )

        try:
            notifications = await self.notification_repo.delete_by_project(project_id)
            comments = await self.comment_repo.delete_by_project(project_id)
            grants = await self.access_repo.delete_by_project(project_id)
            await self.project_repo.delete(project)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete project", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Project deleted",
            project_id=str(project_id),
            grants_removed=grants,
            comments_removed=comments,
            notifications_removed=notifications,
        )

    async def list_tools(self) -> list[Tool]:
        return await self.tool_repo.list_all()
