"""Team endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.collab.api.dependencies import CurrentPrincipal, TeamServiceDep
from src.collab.schemas.team import (
    TeamCreate,
    TeamInvitationCreate,
    TeamListItem,
    TeamMemberRead,
    TeamRead,
)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post(
    "",
    response_model=TeamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
)
async def create_team(
    request: TeamCreate,
    principal_id: CurrentPrincipal,
    team_service: TeamServiceDep,
) -> TeamRead:
    team = await team_service.create_team(principal_id, request.name, request.description)
    return TeamRead.model_validate(team)


@router.get("", response_model=list[TeamListItem], summary="List my teams")
async def list_teams(
    principal_id: CurrentPrincipal,
    team_service: TeamServiceDep,
) -> list[TeamListItem]:
    listings = await team_service.list_teams(principal_id)
    return [
        TeamListItem(
            **TeamRead.model_validate(item.team).model_dump(),
            role=item.role,
            member_count=item.member_count,
        )
        for item in listings
    ]


@router.post(
    "/{team_id}/invitations",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Invite member",
    description="Team owners and admins add a member by email; the invitee is notified.",
    responses={
        403: {"description": "Caller is not a team owner or admin"},
        404: {"description": "Team or user not found"},
        409: {"description": "User is already a member"},
    },
)
async def invite_member(
    team_id: UUID,
    request: TeamInvitationCreate,
    principal_id: CurrentPrincipal,
    team_service: TeamServiceDep,
) -> TeamMemberRead:
    member, _ = await team_service.invite_member(
        team_id, principal_id, request.email, request.role
    )
    return TeamMemberRead.model_validate(member)
