"""Unit tests for NotificationDispatcher."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.collab.core.errors import InvalidEventPayload, NotFound
from src.collab.models import AccessLevel, Notification
from src.collab.schemas.notification import NotificationPreferences
from src.collab.services.notification_dispatcher import (
    NotificationDispatcher,
    RecipientOutcome,
)
from src.collab.services.notification_events import NotificationEvent
from tests.factories import ProjectAccessFactory, ProjectFactory, TeamFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def project(owner_id):
    return ProjectFactory.build(owner_id=owner_id, name="Blog", description="My blog")


@pytest.fixture
def project_repo(project) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = project
    return repo


@pytest.fixture
def access_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.list_by_project.return_value = []
    return repo


@pytest.fixture
def team_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def notification_repo() -> AsyncMock:
    repo = AsyncMock()

    async def _insert(notification: Notification) -> Notification:
        return notification

    repo.insert.side_effect = _insert
    return repo


@pytest.fixture
def preferences() -> dict:
    """Per-recipient preference overrides; absent principals get defaults."""
    return {}


@pytest.fixture
def preference_service(preferences) -> AsyncMock:
    service = AsyncMock()

    async def _get(principal_id):
        return preferences.get(principal_id, NotificationPreferences())

    service.get_preferences.side_effect = _get
    return service


@pytest.fixture
def directory() -> AsyncMock:
    directory = AsyncMock()
    directory.get_display_name.return_value = "Olivia"
    directory.get_contact_address.side_effect = lambda pid: f"{pid.hex[:8]}@example.com"
    directory.existing_principals.side_effect = lambda ids: set(ids)
    return directory


@pytest.fixture
def email_sender() -> MagicMock:
    sender = MagicMock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def dispatcher(
    project_repo,
    access_repo,
    team_repo,
    notification_repo,
    preference_service,
    directory,
    email_sender,
    mock_session,
) -> NotificationDispatcher:
    return NotificationDispatcher(
        project_repo=project_repo,
        access_repo=access_repo,
        team_repo=team_repo,
        notification_repo=notification_repo,
        preference_service=preference_service,
        directory=directory,
        email_sender=email_sender,
        session=mock_session,
    )


class TestProjectShared:
    async def test_grantee_notified_and_emailed(
        self, dispatcher, project, owner_id, alice_id, notification_repo, email_sender
    ):
        result = await dispatcher.dispatch(
            NotificationEvent.project_shared(project.id, owner_id, alice_id, AccessLevel.EDIT)
        )

        entry = result.for_recipient(alice_id)
        assert entry.outcome == RecipientOutcome.NOTIFIED
        assert entry.email_sent is True

        notification = notification_repo.insert.call_args[0][0]
        assert notification.recipient_id == alice_id
        assert notification.category == "project_shared"
        assert notification.project_id == project.id
        assert notification.payload["access_level"] == "edit"
        assert "Blog" in notification.content

        to_address, subject, html_body = email_sender.send.call_args[0]
        assert to_address == f"{alice_id.hex[:8]}@example.com"
        assert "Blog" in subject
        assert f"/projects/{project.id}" in html_body

    async def test_category_toggle_off_skips_in_app_but_still_emails(
        self, dispatcher, project, owner_id, alice_id, preferences, notification_repo, email_sender
    ):
        preferences[alice_id] = NotificationPreferences(project_sharing=False)

        result = await dispatcher.dispatch(
            NotificationEvent.project_shared(project.id, owner_id, alice_id, "edit")
        )

        entry = result.for_recipient(alice_id)
        assert entry.outcome == RecipientOutcome.SKIPPED_BY_PREFERENCE
        assert entry.notification_id is None
        assert entry.email_sent is True
        notification_repo.insert.assert_not_called()
        email_sender.send.assert_called_once()

    async def test_everything_disabled_does_nothing(
        self, dispatcher, project, owner_id, alice_id, preferences, notification_repo, email_sender
    ):
        preferences[alice_id] = NotificationPreferences(email_enabled=False, in_app_enabled=False)

        result = await dispatcher.dispatch(
            NotificationEvent.project_shared(project.id, owner_id, alice_id, "view")
        )

        entry = result.for_recipient(alice_id)
        assert entry.outcome == RecipientOutcome.SKIPPED_BY_PREFERENCE
        assert entry.email_sent is None
        notification_repo.insert.assert_not_called()
        email_sender.send.assert_not_called()

    async def test_email_disabled_keeps_in_app(
        self, dispatcher, project, owner_id, alice_id, preferences, email_sender
    ):
        preferences[alice_id] = NotificationPreferences(email_enabled=False)

        result = await dispatcher.dispatch(
            NotificationEvent.project_shared(project.id, owner_id, alice_id, "view")
        )

        assert result.for_recipient(alice_id).outcome == RecipientOutcome.NOTIFIED
        email_sender.send.assert_not_called()

    async def test_missing_project_fails_whole_dispatch(
        self, dispatcher, project_repo, owner_id, alice_id, notification_repo
    ):
        project_repo.get_by_id.return_value = None

        with pytest.raises(NotFound):
            await dispatcher.dispatch(
                NotificationEvent.project_shared(uuid4(), owner_id, alice_id, "view")
            )
        notification_repo.insert.assert_not_called()


class TestCommentAdded:
    @pytest.fixture(autouse=True)
    def _grants(self, access_repo, project, alice_id, bob_id):
        access_repo.list_by_project.return_value = [
            ProjectAccessFactory.edit(project_id=project.id, user_id=alice_id),
            ProjectAccessFactory.build(project_id=project.id, user_id=bob_id),
        ]

    async def test_owner_and_other_grantees_notified_actor_excluded(
        self, dispatcher, project, owner_id, alice_id, bob_id, notification_repo, email_sender
    ):
        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, alice_id, uuid4(), excerpt="Looks good")
        )

        assert {r.recipient_id for r in result.results} == {owner_id, bob_id}
        assert all(r.outcome == RecipientOutcome.NOTIFIED for r in result.results)
        assert notification_repo.insert.call_count == 2
        assert email_sender.send.call_count == 2
        assert "Looks good" in notification_repo.insert.call_args[0][0].content

    async def test_email_failure_for_one_recipient_is_contained(
        self, dispatcher, project, owner_id, alice_id, bob_id, directory, email_sender
    ):
        bob_address = f"{bob_id.hex[:8]}@example.com"
        email_sender.send.side_effect = lambda to, subject, body: to != bob_address

        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, alice_id, uuid4())
        )

        bob = result.for_recipient(bob_id)
        assert bob.outcome == RecipientOutcome.FAILED
        assert bob.error_code == "delivery_failure"
        assert bob.notification_id is not None
        assert result.for_recipient(owner_id).outcome == RecipientOutcome.NOTIFIED

    async def test_email_sender_raising_is_contained(
        self, dispatcher, project, owner_id, alice_id, bob_id, email_sender
    ):
        email_sender.send.side_effect = RuntimeError("SMTP down")

        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, alice_id, uuid4())
        )

        assert result.count(RecipientOutcome.FAILED) == 2
        assert all(r.error_code == "delivery_failure" for r in result.results)
        assert all(r.notification_id is not None for r in result.results)

    async def test_contact_lookup_error_for_one_recipient_is_contained(
        self, dispatcher, project, owner_id, alice_id, bob_id, directory, email_sender
    ):
        def _address(pid):
            if pid == owner_id:
                raise RuntimeError("profile lookup failed")
            return f"{pid.hex[:8]}@example.com"

        directory.get_contact_address.side_effect = _address

        result = await dispatcher.dispatch_after_commit(
            NotificationEvent.comment_added(project.id, alice_id, uuid4())
        )

        owner = result.for_recipient(owner_id)
        assert owner.outcome == RecipientOutcome.FAILED
        assert owner.error_code == "delivery_failure"
        assert owner.notification_id is not None
        assert result.for_recipient(bob_id).outcome == RecipientOutcome.NOTIFIED
        email_sender.send.assert_called_once()

    async def test_display_name_error_is_delivery_failure(
        self, dispatcher, project, owner_id, alice_id, bob_id, directory
    ):
        directory.get_display_name.side_effect = ["Alice", RuntimeError("boom"), "Bob"]

        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, alice_id, uuid4())
        )

        assert result.for_recipient(owner_id).error_code == "delivery_failure"
        assert result.for_recipient(bob_id).outcome == RecipientOutcome.NOTIFIED

    async def test_persistence_failure_skips_email_and_rolls_back(
        self, dispatcher, project, owner_id, alice_id, notification_repo, email_sender, mock_session
    ):
        notification_repo.insert.side_effect = RuntimeError("connection lost")

        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, alice_id, uuid4())
        )

        assert all(r.error_code == "persistence_failure" for r in result.results)
        email_sender.send.assert_not_called()
        assert mock_session.rollback.await_count == 2

    async def test_owner_commenting_notifies_only_grantees(
        self, dispatcher, project, owner_id, alice_id, bob_id
    ):
        result = await dispatcher.dispatch(
            NotificationEvent.comment_added(project.id, owner_id, uuid4())
        )

        assert [r.recipient_id for r in result.results] == [alice_id, bob_id]


class TestTeamInvitation:
    async def test_invitee_notified_with_team_link(
        self, dispatcher, team_repo, owner_id, alice_id, notification_repo, email_sender
    ):
        team = TeamFactory.build(name="Design", creator_id=owner_id)
        team_repo.get_by_id.return_value = team

        result = await dispatcher.dispatch(
            NotificationEvent.team_invitation(team.id, owner_id, alice_id, role="admin")
        )

        assert result.for_recipient(alice_id).outcome == RecipientOutcome.NOTIFIED
        notification = notification_repo.insert.call_args[0][0]
        assert notification.project_id is None
        assert notification.payload["role"] == "admin"
        assert f"/teams/{team.id}" in email_sender.send.call_args[0][2]

    async def test_missing_team_fails_whole_dispatch(self, dispatcher, team_repo, owner_id):
        team_repo.get_by_id.return_value = None

        with pytest.raises(NotFound):
            await dispatcher.dispatch(NotificationEvent.team_invitation(uuid4(), owner_id, uuid4()))


class TestSystemAnnouncement:
    async def test_listed_recipients_deduplicated(self, dispatcher, alice_id, bob_id):
        result = await dispatcher.dispatch(
            NotificationEvent.system_announcement(
                title="Maintenance",
                message="Tonight at 10pm",
                recipient_ids=[alice_id, bob_id, alice_id],
            )
        )

        assert [r.recipient_id for r in result.results] == [alice_id, bob_id]

    async def test_no_contact_address_is_delivery_failure(
        self, dispatcher, directory, alice_id, email_sender
    ):
        directory.get_contact_address.side_effect = None
        directory.get_contact_address.return_value = None

        result = await dispatcher.dispatch(
            NotificationEvent.system_announcement(
                title="Hi", message="There", recipient_ids=[alice_id]
            )
        )

        entry = result.for_recipient(alice_id)
        assert entry.outcome == RecipientOutcome.FAILED
        assert entry.error_code == "delivery_failure"
        email_sender.send.assert_not_called()

    async def test_unknown_recipient_gets_no_notification_row(
        self, dispatcher, directory, alice_id, notification_repo, email_sender
    ):
        stranger_id = uuid4()
        directory.existing_principals.side_effect = lambda ids: {alice_id}

        result = await dispatcher.dispatch(
            NotificationEvent.system_announcement(
                title="Maintenance", message="Tonight", recipient_ids=[stranger_id, alice_id]
            )
        )

        assert [r.recipient_id for r in result.results] == [stranger_id, alice_id]
        stranger = result.for_recipient(stranger_id)
        assert stranger.outcome == RecipientOutcome.FAILED
        assert stranger.error_code == "recipient_not_found"
        assert stranger.notification_id is None
        assert result.for_recipient(alice_id).outcome == RecipientOutcome.NOTIFIED
        notification_repo.insert.assert_called_once()
        assert notification_repo.insert.call_args[0][0].recipient_id == alice_id
        email_sender.send.assert_called_once()


class TestValidation:
    async def test_invalid_payload_persists_nothing(self, dispatcher, notification_repo):
        with pytest.raises(InvalidEventPayload):
            await dispatcher.dispatch(NotificationEvent("project_shared", uuid4(), {}))
        notification_repo.insert.assert_not_called()

    async def test_unknown_category_rejected(self, dispatcher):
        with pytest.raises(InvalidEventPayload):
            await dispatcher.dispatch(NotificationEvent("weekly_digest", uuid4(), {}))

    async def test_dispatch_after_commit_swallows_domain_errors(
        self, dispatcher, project_repo, owner_id, alice_id
    ):
        project_repo.get_by_id.return_value = None

        result = await dispatcher.dispatch_after_commit(
            NotificationEvent.project_shared(uuid4(), owner_id, alice_id, "view")
        )

        assert result is None

    async def test_dispatch_after_commit_swallows_unexpected_errors(
        self, dispatcher, project_repo, owner_id, alice_id
    ):
        project_repo.get_by_id.side_effect = RuntimeError("connection reset")

        result = await dispatcher.dispatch_after_commit(
            NotificationEvent.project_shared(uuid4(), owner_id, alice_id, "view")
        )

        assert result is None
