"""Project sharing grants."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.errors import (
    ConstraintViolation,
    InvalidGrant,
    NotFound,
    RecipientNotFound,
    Unauthorized,
)
from src.collab.core.logging import get_logger
from src.collab.models import AccessLevel, Operation, Project, ProjectAccess
from src.collab.repositories import ProjectAccessRepository, ProjectRepository
from src.collab.services.authorization import authorize_project
from src.collab.services.directory import IdentityDirectory
from src.collab.services.notification_dispatcher import DispatchResult, NotificationDispatcher
from src.collab.services.notification_events import NotificationEvent

logger = get_logger(__name__)


@dataclass
class GrantUpsertResult:
    grant: ProjectAccess
    updated: bool
    dispatch: DispatchResult | None = None


@dataclass
class GrantView:
    """A grant with the grantee's display data."""

    grant: ProjectAccess
    display_name: str
    email: str | None


@dataclass
class AccessibleProject:
    project: Project
    is_shared: bool
    access_level: AccessLevel | None = None


def parse_access_level(level: str | AccessLevel) -> AccessLevel:
    try:
        return AccessLevel(level)
    except ValueError as e:
        raise InvalidGrant(f"Unknown access level '{level}'") from e


class GrantService:
    """Create, update, revoke and list project sharing grants."""

    def __init__(
        self,
        access_repo: ProjectAccessRepository,
        project_repo: ProjectRepository,
        directory: IdentityDirectory,
        dispatcher: NotificationDispatcher,
        session: AsyncSession,
    ):
        self.access_repo = access_repo
        self.project_repo = project_repo
        self.directory = directory
        self.dispatcher = dispatcher
        self.session = session

    async def upsert_grant(
        self,
        project_id: UUID,
        actor_id: UUID,
        grantee_contact: str,
        level: str | AccessLevel,
    ) -> GrantUpsertResult:
        """Share a project, or change the level of an existing share.

        Last write wins; the (project, grantee) pair never has more than one
        row. A ``project_shared`` notification is dispatched only when a new
        grant is created.

        Raises:
            NotFound: project does not exist.
            Unauthorized: caller is not the owner.
            InvalidGrant: unknown level, or the grantee is the owner.
            RecipientNotFound: no principal has this contact address.
        """
        project, _ = await authorize_project(
            project_id, actor_id, Operation.MANAGE_GRANTS, self.project_repo, self.access_repo
        )
        access_level = parse_access_level(level)

        grantee_id = await self.directory.resolve_principal_by_contact(grantee_contact)
        if grantee_id is None:
            raise RecipientNotFound("No user found with that email address")
        if grantee_id == project.owner_id:
            raise InvalidGrant("Cannot share a project with its owner")

        try:
            grant, updated = await self._write_grant(project.id, grantee_id, access_level)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to upsert grant", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Grant updated" if updated else "Grant created",
            project_id=str(project.id),
            grantee_id=str(grantee_id),
            access_level=access_level.value,
        )

        dispatch = None
        if not updated:
            dispatch = await self.dispatcher.dispatch_after_commit(
                NotificationEvent.project_shared(
                    project_id=project.id,
                    actor_id=actor_id,
                    grantee_id=grantee_id,
                    level=access_level,
                )
            )
        return GrantUpsertResult(grant=grant, updated=updated, dispatch=dispatch)

    async def _write_grant(
        self, project_id: UUID, grantee_id: UUID, level: AccessLevel
    ) -> tuple[ProjectAccess, bool]:
        existing = await self.access_repo.get_by_pair(project_id, grantee_id)
        if existing is not None:
            return await self.access_repo.update_level(existing, level), True

        try:
            return await self.access_repo.insert(project_id, grantee_id, level), False
        except ConstraintViolation:
            # A concurrent upsert inserted the pair first; apply ours on top.
            existing = await self.access_repo.get_by_pair(project_id, grantee_id)
            if existing is None:
                raise
            logger.info(
                "Grant insert lost race, retrying as update",
                project_id=str(project_id),
                grantee_id=str(grantee_id),
            )
            return await self.access_repo.update_level(existing, level), True

    async def remove_grant(self, project_id: UUID, grant_id: UUID, principal_id: UUID) -> None:
        """Revoke a grant. Allowed for the owner, or the grantee revoking their own access.

        Raises:
            NotFound: project or grant does not exist.
            Unauthorized: caller is neither the owner nor the grantee.
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found")
        grant = await self.access_repo.get_by_id(grant_id)
        if grant is None or grant.project_id != project_id:
            raise NotFound("Grant not found")
        if principal_id not in (project.owner_id, grant.user_id):
            raise Unauthorized("Only the owner or the grantee can remove this access")

        try:
            await self.access_repo.delete(grant)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to remove grant", grant_id=str(grant_id), error=str(e))
            raise

        logger.info(
            "Grant removed",
            project_id=str(project_id),
            grantee_id=str(grant.user_id),
            removed_by=str(principal_id),
        )

    async def list_grants(self, project_id: UUID, principal_id: UUID) -> list[GrantView]:
        """Grants on a project with grantee display data.

        The owner sees every grant; a grantee sees only their own.

        Raises:
            NotFound: project does not exist.
            Unauthorized: caller is neither the owner nor a grantee.
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found")

        if principal_id == project.owner_id:
            grants = await self.access_repo.list_by_project(project_id)
        else:
            own = await self.access_repo.get_by_pair(project_id, principal_id)
            if own is None:
                raise Unauthorized("Not permitted to view access for this project")
            grants = [own]

        names = await self.directory.get_display_names(g.user_id for g in grants)
        views = []
        for grant in grants:
            views.append(
                GrantView(
                    grant=grant,
                    display_name=names[grant.user_id],
                    email=await self.directory.get_contact_address(grant.user_id),
                )
            )
        return views

    async def list_accessible_projects(self, principal_id: UUID) -> list[AccessibleProject]:
        """Owned projects first, then shared ones, each newest first."""
        owned = await self.project_repo.list_owned(principal_id)
        shared = await self.project_repo.list_shared_with(principal_id)
        return [AccessibleProject(project=p, is_shared=False) for p in owned] + [
            AccessibleProject(project=p, is_shared=True, access_level=g.level) for p, g in shared
        ]
