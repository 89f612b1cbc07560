"""Repositories for teams and team membership."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.collab.models import Team, TeamMember
from src.collab.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Repository for Team entity."""

    model = Team

    async def list_for_user(self, user_id: UUID) -> list[tuple[Team, TeamMember]]:
        """Teams the principal belongs to, with the principal's membership."""
        result = await self.session.execute(
            select(Team, TeamMember)
            .join(TeamMember, col(TeamMember.team_id) == col(Team.id))
            .where(TeamMember.user_id == user_id)
            .order_by(col(Team.created_at).desc())
        )
        return [(team, member) for team, member in result.all()]


class TeamMemberRepository(BaseRepository[TeamMember]):
    """Repository for TeamMember entity."""

    model = TeamMember

    async def get_membership(self, team_id: UUID, user_id: UUID) -> TeamMember | None:
        result = await self.session.execute(
            select(TeamMember).where(
                TeamMember.team_id == team_id,
                TeamMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_members(self, team_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TeamMember).where(TeamMember.team_id == team_id)
        )
        return int(result.scalar_one())

    def create_membership(self, team_id: UUID, user_id: UUID, role: str) -> TeamMember:
        """Create a new membership (add to session, no commit)."""
        member = TeamMember(team_id=team_id, user_id=user_id, role=role)
        self.session.add(member)
        return member
