"""Recipient-facing notification operations."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.config import get_settings
from src.collab.core.errors import NotFoundOrForbidden
from src.collab.core.logging import get_logger
from src.collab.models import Notification
from src.collab.repositories import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    """List, read and delete a recipient's own notifications."""

    def __init__(self, notification_repo: NotificationRepository, session: AsyncSession):
        self.notification_repo = notification_repo
        self.session = session

    async def list(
        self, recipient_id: UUID, cursor: str | None = None, limit: int | None = None
    ) -> tuple[list[Notification], str | None, bool]:
        """Active notifications, newest first. Limit is clamped to the configured max."""
        settings = get_settings()
        if limit is None or limit < 1:
            limit = settings.notifications_page_size
        limit = min(limit, settings.notifications_max_page_size)
        return await self.notification_repo.list_active(recipient_id, cursor, limit)

    async def unread_count(self, recipient_id: UUID) -> int:
        return await self.notification_repo.count_unread(recipient_id)

    async def _get_owned(self, notification_id: UUID, recipient_id: UUID) -> Notification:
        notification = await self.notification_repo.get_active_for_recipient(
            notification_id, recipient_id
        )
        if notification is None:
            raise NotFoundOrForbidden("Notification not found")
        return notification

    async def mark_read(self, notification_id: UUID, recipient_id: UUID) -> Notification:
        """Mark one notification read. Already-read notifications are left untouched.

        Raises:
            NotFoundOrForbidden: missing, soft-deleted, or owned by someone else.
        """
        notification = await self._get_owned(notification_id, recipient_id)
        if notification.is_read:
            return notification

        try:
            await self.notification_repo.mark_read(notification)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to mark notification read", error=str(e))
            raise
        return notification

    async def mark_all_read(self, recipient_id: UUID) -> int:
        """Mark every active unread notification read. Returns the number changed."""
        try:
            updated = await self.notification_repo.mark_all_read(recipient_id)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to mark notifications read", error=str(e))
            raise

        logger.info("Notifications marked read", recipient_id=str(recipient_id), count=updated)
        return updated

    async def soft_delete(self, notification_id: UUID, recipient_id: UUID) -> None:
        """Hide a notification from all future listings.

        Raises:
            NotFoundOrForbidden: missing, already deleted, or owned by someone else.
        """
        notification = await self._get_owned(notification_id, recipient_id)
        try:
            await self.notification_repo.soft_delete(notification)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete notification", error=str(e))
            raise

        logger.info(
            "Notification deleted",
            notification_id=str(notification_id),
            recipient_id=str(recipient_id),
        )
