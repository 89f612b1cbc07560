"""Unit tests for GrantService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.collab.core.errors import (
    ConstraintViolation,
    InvalidGrant,
    NotFound,
    RecipientNotFound,
    Unauthorized,
)
from src.collab.models import AccessLevel
from src.collab.services.grant_service import GrantService
from tests.factories import ProjectAccessFactory, ProjectFactory

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
    """Grant store backed by a single in-memory row, enough for one pair."""
    repo = AsyncMock()
    repo.get_by_pair.return_value = None
    repo.get_level.return_value = None

    async def _insert(project_id, user_id, level):
        grant = ProjectAccessFactory.build(
            project_id=project_id, user_id=user_id, access_level=level.value
        )
        repo.get_by_pair.return_value = grant
        return grant

    async def _update(grant, level):
        grant.access_level = level.value
        return grant

    repo.insert.side_effect = _insert
    repo.update_level.side_effect = _update
    return repo


@pytest.fixture
def directory(alice_id) -> AsyncMock:
    directory = AsyncMock()
    directory.resolve_principal_by_contact.side_effect = lambda contact: (
        alice_id if contact == "alice@x.com" else None
    )
    return directory


@pytest.fixture
def dispatcher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def grant_service(access_repo, project_repo, directory, dispatcher, mock_session) -> GrantService:
    return GrantService(access_repo, project_repo, directory, dispatcher, mock_session)


class TestUpsertGrant:
    async def test_create_then_update_keeps_one_row(
        self, grant_service, project, owner_id, access_repo, dispatcher
    ):
        """Share view, then re-share edit: same row, level updated, one notification."""
        first = await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "view")
        second = await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "edit")

        assert first.updated is False
        assert second.updated is True
        assert second.grant is first.grant
        assert second.grant.level == AccessLevel.EDIT
        access_repo.insert.assert_awaited_once()
        dispatcher.dispatch_after_commit.assert_awaited_once()

    async def test_new_grant_dispatches_project_shared(
        self, grant_service, project, owner_id, alice_id, dispatcher, mock_session
    ):
        await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "edit")

        event = dispatcher.dispatch_after_commit.call_args[0][0]
        assert event.category == "project_shared"
        assert event.actor_id == owner_id
        assert event.payload["grantee_id"] == alice_id
        assert event.payload["access_level"] == "edit"
        mock_session.commit.assert_awaited_once()

    async def test_unknown_level_rejected(self, grant_service, project, owner_id, access_repo):
        with pytest.raises(InvalidGrant):
            await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "admin")
        access_repo.insert.assert_not_called()

    async def test_unknown_contact_rejected(self, grant_service, project, owner_id):
        with pytest.raises(RecipientNotFound):
            await grant_service.upsert_grant(project.id, owner_id, "nobody@x.com", "view")

    async def test_owner_cannot_be_grantee(self, grant_service, project, owner_id, directory):
        directory.resolve_principal_by_contact.side_effect = None
        directory.resolve_principal_by_contact.return_value = owner_id

        with pytest.raises(InvalidGrant):
            await grant_service.upsert_grant(project.id, owner_id, "owner@x.com", "view")

    async def test_non_owner_cannot_share(
        self, grant_service, project, alice_id, access_repo, dispatcher
    ):
        access_repo.get_level.return_value = AccessLevel.EDIT

        with pytest.raises(Unauthorized):
            await grant_service.upsert_grant(project.id, alice_id, "bob@x.com", "view")
        dispatcher.dispatch_after_commit.assert_not_called()

    async def test_missing_project(self, grant_service, project_repo, owner_id):
        project_repo.get_by_id.return_value = None

        with pytest.raises(NotFound):
            await grant_service.upsert_grant(uuid4(), owner_id, "alice@x.com", "view")

    async def test_lost_insert_race_retried_as_update(
        self, grant_service, project, owner_id, alice_id, access_repo, dispatcher
    ):
        winner = ProjectAccessFactory.build(project_id=project.id, user_id=alice_id)
        access_repo.get_by_pair.side_effect = [None, winner]
        access_repo.insert.side_effect = ConstraintViolation()

        result = await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "edit")

        assert result.updated is True
        assert result.grant is winner
        assert winner.level == AccessLevel.EDIT
        dispatcher.dispatch_after_commit.assert_not_called()

    async def test_commit_failure_rolls_back(self, grant_service, project, owner_id, mock_session):
        mock_session.commit.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await grant_service.upsert_grant(project.id, owner_id, "alice@x.com", "view")
        mock_session.rollback.assert_awaited_once()


class TestRemoveGrant:
    @pytest.fixture
    def grant(self, project, alice_id, access_repo):
        grant = ProjectAccessFactory.build(project_id=project.id, user_id=alice_id)
        access_repo.get_by_id.return_value = grant
        return grant

    async def test_owner_removes(self, grant_service, project, owner_id, grant, access_repo):
        await grant_service.remove_grant(project.id, grant.id, owner_id)
        access_repo.delete.assert_awaited_once_with(grant)

    async def test_grantee_removes_own_access(
        self, grant_service, project, alice_id, grant, access_repo
    ):
        await grant_service.remove_grant(project.id, grant.id, alice_id)
        access_repo.delete.assert_awaited_once_with(grant)

    async def test_third_party_cannot_remove(self, grant_service, project, bob_id, grant):
        with pytest.raises(Unauthorized):
            await grant_service.remove_grant(project.id, grant.id, bob_id)

    async def test_grant_from_other_project_not_found(
        self, grant_service, project, owner_id, access_repo
    ):
        access_repo.get_by_id.return_value = ProjectAccessFactory.build(project_id=uuid4())

        with pytest.raises(NotFound):
            await grant_service.remove_grant(project.id, uuid4(), owner_id)


class TestListGrants:
    @pytest.fixture
    def grants(self, project, alice_id, bob_id, access_repo, directory):
        grants = [
            ProjectAccessFactory.edit(project_id=project.id, user_id=alice_id),
            ProjectAccessFactory.build(project_id=project.id, user_id=bob_id),
        ]
        access_repo.list_by_project.return_value = grants
        directory.get_display_names.side_effect = lambda ids: {pid: "Name" for pid in ids}
        directory.get_contact_address.return_value = "someone@x.com"
        return grants

    async def test_owner_sees_all(self, grant_service, project, owner_id, grants):
        views = await grant_service.list_grants(project.id, owner_id)
        assert [v.grant for v in views] == grants

    async def test_grantee_sees_only_own(
        self, grant_service, project, alice_id, grants, access_repo
    ):
        access_repo.get_by_pair.return_value = grants[0]

        views = await grant_service.list_grants(project.id, alice_id)

        assert [v.grant for v in views] == [grants[0]]
        assert views[0].display_name == "Name"

    async def test_stranger_rejected(self, grant_service, project, grants):
        with pytest.raises(Unauthorized):
            await grant_service.list_grants(project.id, uuid4())


class TestListAccessibleProjects:
    async def test_owned_first_then_shared_with_level(
        self, grant_service, project_repo, alice_id
    ):
        owned = [ProjectFactory.build(owner_id=alice_id) for _ in range(2)]
        shared_project = ProjectFactory.build()
        grant = ProjectAccessFactory.edit(project_id=shared_project.id, user_id=alice_id)
        project_repo.list_owned.return_value = owned
        project_repo.list_shared_with.return_value = [(shared_project, grant)]

        items = await grant_service.list_accessible_projects(alice_id)

        assert [i.project for i in items] == [*owned, shared_project]
        assert [i.is_shared for i in items] == [False, False, True]
        assert items[-1].access_level == AccessLevel.EDIT
        assert items[0].access_level is None
