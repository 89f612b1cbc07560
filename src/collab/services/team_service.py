"""Team service."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.errors import (
    ConstraintViolation,
    NotFound,
    RecipientNotFound,
    Unauthorized,
)
from src.collab.core.logging import get_logger
from src.collab.models import Team, TeamMember, TeamRole
from src.collab.repositories import TeamMemberRepository, TeamRepository
from src.collab.services.directory import IdentityDirectory
from src.collab.services.notification_dispatcher import DispatchResult, NotificationDispatcher
from src.collab.services.notification_events import NotificationEvent

logger = get_logger(__name__)

INVITING_ROLES = frozenset({TeamRole.OWNER.value, TeamRole.ADMIN.value})


@dataclass
class TeamListing:
    team: Team
    role: str
    member_count: int


class TeamService:
    """Teams and team invitations."""

    def __init__(
        self,
        team_repo: TeamRepository,
        member_repo: TeamMemberRepository,
        directory: IdentityDirectory,
        dispatcher: NotificationDispatcher,
        session: AsyncSession,
    ):
        self.team_repo = team_repo
        self.member_repo = member_repo
        self.directory = directory
        self.dispatcher = dispatcher
        self.session = session

    async def create_team(self, creator_id: UUID, name: str, description: str | None) -> Team:
        """Create a team with its creator as owner."""
        team = Team(name=name, description=description, creator_id=creator_id)
        try:
            self.team_repo.add(team)
            await self.session.flush()
            self.member_repo.create_membership(team.id, creator_id, TeamRole.OWNER.value)
            await self.session.commit()
            await self.session.refresh(team)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create team", error=str(e))
            raise

        logger.info("Team created", team_id=str(team.id), creator_id=str(creator_id))
        return team

    async def list_teams(self, principal_id: UUID) -> list[TeamListing]:
        """Teams the principal belongs to, newest first."""
        rows = await self.team_repo.list_for_user(principal_id)
        return [
            TeamListing(
                team=team,
                role=member.role,
                member_count=await self.member_repo.count_members(team.id),
            )
            for team, member in rows
        ]

    async def invite_member(
        self,
        team_id: UUID,
        inviter_id: UUID,
        invitee_contact: str,
        role: str = TeamRole.MEMBER.value,
    ) -> tuple[TeamMember, DispatchResult | None]:
        """Add a member by email address and notify them.

        Raises:
            NotFound: team does not exist.
            Unauthorized: inviter is not the team owner or an admin.
            RecipientNotFound: no principal has this contact address.
            ConstraintViolation: the invitee is already a member.
        """
        team = await self.team_repo.get_by_id(team_id)
        if team is None:
            raise NotFound("Team not found")

        inviter = await self.member_repo.get_membership(team_id, inviter_id)
        if inviter is None or inviter.role not in INVITING_ROLES:
            raise Unauthorized("Only team owners and admins can invite members")

        invitee_id = await self.directory.resolve_principal_by_contact(invitee_contact)
        if invitee_id is None:
            raise RecipientNotFound("No user found with that email address")

        if await self.member_repo.get_membership(team_id, invitee_id) is not None:
            raise ConstraintViolation("User is already a member of this team")

        try:
            member = self.member_repo.create_membership(team_id, invitee_id, role)
            await self.session.commit()
            await self.session.refresh(member)
        except IntegrityError as e:
            await self.session.rollback()
            raise ConstraintViolation("User is already a member of this team") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add team member", team_id=str(team_id), error=str(e))
            raise

        logger.info(
            "Team member invited",
            team_id=str(team_id),
            invitee_id=str(invitee_id),
            invited_by=str(inviter_id),
            role=role,
        )

        dispatch = await self.dispatcher.dispatch_after_commit(
            NotificationEvent.team_invitation(
                team_id=team.id, actor_id=inviter_id, invitee_id=invitee_id, role=role
            )
        )
        return member, dispatch
