"""Unit tests for NotificationService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.collab.core.errors import NotFound, NotFoundOrForbidden
from src.collab.services.notification_service import NotificationService
from tests.factories import NotificationFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def notification_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_active_for_recipient.return_value = None
    repo.list_active.return_value = ([], None, False)
    return repo


@pytest.fixture
def notification_service(notification_repo, mock_session) -> NotificationService:
    return NotificationService(notification_repo, mock_session)


class TestList:
    async def test_default_page_size(self, notification_service, notification_repo, alice_id):
        await notification_service.list(alice_id)
        notification_repo.list_active.assert_awaited_once_with(alice_id, None, 20)

    async def test_limit_clamped_to_max(self, notification_service, notification_repo, alice_id):
        await notification_service.list(alice_id, cursor="abc", limit=5000)
        notification_repo.list_active.assert_awaited_once_with(alice_id, "abc", 100)


class TestMarkRead:
    async def test_marks_unread(self, notification_service, notification_repo, mock_session):
        notification = NotificationFactory.build()
        notification_repo.get_active_for_recipient.return_value = notification

        await notification_service.mark_read(notification.id, notification.recipient_id)

        notification_repo.mark_read.assert_awaited_once_with(notification)
        mock_session.commit.assert_awaited_once()

    async def test_already_read_is_noop(
        self, notification_service, notification_repo, mock_session
    ):
        notification = NotificationFactory.read()
        notification_repo.get_active_for_recipient.return_value = notification

        result = await notification_service.mark_read(notification.id, notification.recipient_id)

        assert result.is_read is True
        notification_repo.mark_read.assert_not_called()
        mock_session.commit.assert_not_called()

    async def test_not_owned_or_missing(self, notification_service, alice_id):
        with pytest.raises(NotFoundOrForbidden) as exc_info:
            await notification_service.mark_read(uuid4(), alice_id)

        assert isinstance(exc_info.value, NotFound)
        assert exc_info.value.status_code == 404


class TestMarkAllRead:
    async def test_returns_count(self, notification_service, notification_repo, alice_id):
        notification_repo.mark_all_read.return_value = 3
        assert await notification_service.mark_all_read(alice_id) == 3

    async def test_nothing_unread_returns_zero(
        self, notification_service, notification_repo, alice_id
    ):
        notification_repo.mark_all_read.return_value = 0
        assert await notification_service.mark_all_read(alice_id) == 0

    async def test_failure_rolls_back(
        self, notification_service, notification_repo, mock_session, alice_id
    ):
        notification_repo.mark_all_read.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await notification_service.mark_all_read(alice_id)
        mock_session.rollback.assert_awaited_once()


class TestSoftDelete:
    async def test_soft_deletes_owned(self, notification_service, notification_repo):
        notification = NotificationFactory.build()
        notification_repo.get_active_for_recipient.return_value = notification

        await notification_service.soft_delete(notification.id, notification.recipient_id)

        notification_repo.soft_delete.assert_awaited_once_with(notification)

    async def test_already_deleted_is_not_found(self, notification_service, alice_id):
        with pytest.raises(NotFoundOrForbidden):
            await notification_service.soft_delete(uuid4(), alice_id)
