"""Project sharing endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.collab.api.dependencies import CurrentPrincipal, GrantServiceDep
from src.collab.schemas.access import GrantCreate, GrantRead, GrantUpsertResponse

router = APIRouter(prefix="/projects/{project_id}/access", tags=["access"])


@router.get(
    "",
    response_model=list[GrantRead],
    summary="List grants",
    description="The owner sees every grant; a grantee sees only their own.",
    responses={
        403: {"description": "Caller is neither owner nor grantee"},
        404: {"description": "Project not found"},
    },
)
async def list_grants(
    project_id: UUID,
    principal_id: CurrentPrincipal,
    grant_service: GrantServiceDep,
) -> list[GrantRead]:
    views = await grant_service.list_grants(project_id, principal_id)
    return [
        GrantRead(
            id=v.grant.id,
            project_id=v.grant.project_id,
            user_id=v.grant.user_id,
            access_level=v.grant.access_level,
            display_name=v.display_name,
            email=v.email,
            created_at=v.grant.created_at,
            updated_at=v.grant.updated_at,
        )
        for v in views
    ]


@router.post(
    "",
    response_model=GrantUpsertResponse,
    summary="Share project",
    description="Create a grant, or change the level of an existing one. Owner only.",
    responses={
        200: {"description": "Grant created or updated"},
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project or user not found"},
        422: {"description": "Invalid grant (owner as grantee or unknown level)"},
    },
)
async def upsert_grant(
    project_id: UUID,
    request: GrantCreate,
    principal_id: CurrentPrincipal,
    grant_service: GrantServiceDep,
) -> GrantUpsertResponse:
    result = await grant_service.upsert_grant(
        project_id, principal_id, request.email, request.access_level
    )
    return GrantUpsertResponse(
        grant_id=result.grant.id,
        updated=result.updated,
        message="Access level updated" if result.updated else "Project shared",
    )


@router.delete(
    "/{grant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove grant",
    description="The owner may remove any grant; a grantee may remove their own.",
    responses={
        204: {"description": "Grant removed"},
        403: {"description": "Caller is neither owner nor grantee"},
        404: {"description": "Project or grant not found"},
    },
)
async def remove_grant(
    project_id: UUID,
    grant_id: UUID,
    principal_id: CurrentPrincipal,
    grant_service: GrantServiceDep,
) -> None:
    await grant_service.remove_grant(project_id, grant_id, principal_id)
