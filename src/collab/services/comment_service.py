"""Project comments."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.config import get_settings
from src.collab.core.logging import get_logger
from src.collab.models import Operation, ProjectComment
from src.collab.repositories import CommentRepository, ProjectAccessRepository, ProjectRepository
from src.collab.services.authorization import authorize_project
from src.collab.services.directory import IdentityDirectory
from src.collab.services.notification_dispatcher import DispatchResult, NotificationDispatcher
from src.collab.services.notification_events import NotificationEvent

logger = get_logger(__name__)


@dataclass
class CommentView:
    comment: ProjectComment
    author_name: str


class CommentService:
    """Comments on projects. Anyone who can read a project can comment on it."""

    def __init__(
        self,
        comment_repo: CommentRepository,
        project_repo: ProjectRepository,
        access_repo: ProjectAccessRepository,
        directory: IdentityDirectory,
        dispatcher: NotificationDispatcher,
        session: AsyncSession,
    ):
        self.comment_repo = comment_repo
        self.project_repo = project_repo
        self.access_repo = access_repo
        self.directory = directory
        self.dispatcher = dispatcher
        self.session = session

    async def add_comment(
        self, project_id: UUID, author_id: UUID, body: str
    ) -> tuple[ProjectComment, DispatchResult | None]:
        """Persist a comment, then notify the owner and grantees other than the author.

        Raises:
            NotFound: project does not exist.
            Unauthorized: author cannot read the project.
        """
        project, _ = await authorize_project(
            project_id, author_id, Operation.READ, self.project_repo, self.access_repo
        )

        comment = ProjectComment(project_id=project.id, author_id=author_id, body=body)
        try:
            self.comment_repo.add(comment)
            await self.session.commit()
            await self.session.refresh(comment)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add comment", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Comment added",
            project_id=str(project_id),
            comment_id=str(comment.id),
            author_id=str(author_id),
        )

        dispatch = await self.dispatcher.dispatch_after_commit(
            NotificationEvent.comment_added(
                project_id=project.id,
                actor_id=author_id,
                comment_id=comment.id,
                excerpt=body,
            )
        )
        return comment, dispatch

    async def list_comments(
        self,
        project_id: UUID,
        principal_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[CommentView], str | None, bool]:
        """Comments on a project, newest first. Limit is clamped to the configured max."""
        await authorize_project(
            project_id, principal_id, Operation.READ, self.project_repo, self.access_repo
        )
        settings = get_settings()
        limit = min(limit or settings.comments_page_size, settings.notifications_max_page_size)
        comments, next_cursor, has_more = await self.comment_repo.list_by_project(
            project_id, cursor, limit
        )
        names = await self.directory.get_display_names(c.author_id for c in comments)
        views = [CommentView(comment=c, author_name=names[c.author_id]) for c in comments]
        return views, next_cursor, has_more
