"""Notification store and preference repository."""

from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import col, select, update

from src.collab.models import Notification, NotificationPreference
from src.collab.models.base import utc_now
from src.collab.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification entity.

    Every recipient-facing query filters on recipient_id and excludes
    soft-deleted rows.
    """

    model = Notification

    async def insert(self, notification: Notification) -> Notification:
        """Persist a notification and return it with generated fields."""
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def get_active_for_recipient(
        self, notification_id: UUID, recipient_id: UUID
    ) -> Notification | None:
        """Get an active notification only if it belongs to recipient_id."""
        result = await self.session.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
                col(Notification.deleted_at).is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def list_active(
        self, recipient_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[Notification], str | None, bool]:
        """List active notifications for a recipient, newest first."""
        query = select(Notification).where(
            Notification.recipient_id == recipient_id,
            col(Notification.deleted_at).is_(None),
        )
        return await self.paginate(query, cursor, limit)

    async def count_unread(self, recipient_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
                col(Notification.deleted_at).is_(None),
            )
        )
        return int(result.scalar_one())

    async def mark_read(self, notification: Notification) -> Notification:
        notification.is_read = True
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def mark_all_read(self, recipient_id: UUID) -> int:
        """Mark every active unread notification read. Returns rows affected."""
        result = await self.session.execute(
            update(Notification)
            .where(Notification.recipient_id == recipient_id)  # type: ignore[arg-type]
            .where(Notification.is_read == False)  # type: ignore[arg-type]  # noqa: E712
            .where(col(Notification.deleted_at).is_(None))
            .values(is_read=True)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def soft_delete(self, notification: Notification) -> Notification:
        notification.deleted_at = utc_now()
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def delete_by_project(self, project_id: UUID) -> int:
        """Remove notifications about a deleted project."""
        result = await self.session.execute(
            delete(Notification).where(col(Notification.project_id) == project_id)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]


class NotificationPreferenceRepository(BaseRepository[NotificationPreference]):
    """Repository for per-principal notification preferences."""

    model = NotificationPreference

    async def get_by_user(self, user_id: UUID) -> NotificationPreference | None:
        result = await self.session.execute(
            select(NotificationPreference).where(NotificationPreference.user_id == user_id)
        )
        return result.scalar_one_or_none()
