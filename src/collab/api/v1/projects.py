"""Project endpoints - CRUD and tool references, gated by the access policy."""

from uuid import UUID

from fastapi import APIRouter, status

from src.collab.api.dependencies import CurrentPrincipal, GrantServiceDep, ProjectServiceDep
from src.collab.schemas.project import (
    AccessibleProjectRead,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    ToolsUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[AccessibleProjectRead],
    summary="List accessible projects",
    description="Projects the caller owns, then projects shared with them, newest first.",
)
async def list_projects(
    principal_id: CurrentPrincipal,
    grant_service: GrantServiceDep,
) -> list[AccessibleProjectRead]:
    items = await grant_service.list_accessible_projects(principal_id)
    return [
        AccessibleProjectRead(
            **ProjectRead.model_validate(item.project).model_dump(),
            is_shared=item.is_shared,
            access_level=item.access_level.value if item.access_level else None,
        )
        for item in items
    ]


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        404: {"description": "Unknown tool id"},
    },
)
async def create_project(
    request: ProjectCreate,
    principal_id: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> ProjectRead:
    project = await project_service.create_project(principal_id, request)
    return ProjectRead.model_validate(project)


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={
        200: {"description": "Project details"},
        403: {"description": "Caller cannot read this project"},
        404: {"description": "Project not found"},
    },
)
async def get_project(
    project_id: UUID,
    principal_id: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> ProjectRead:
    project = await project_service.get_project(project_id, principal_id)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    description="Owner or edit grantee. Changing visibility is owner-only.",
    responses={
        200: {"description": "Project updated"},
        403: {"description": "Caller cannot edit this project"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    principal_id: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> ProjectRead:
    project = await project_service.update_project(project_id, principal_id, request)
    return ProjectRead.model_validate(project)


@router.put(
    "/{project_id}/tools",
    response_model=ProjectRead,
    summary="Replace project tools",
    responses={
        200: {"description": "Tools updated"},
        403: {"description": "Caller cannot edit this project"},
        404: {"description": "Project or tool not found"},
    },
)
async def set_project_tools(
    project_id: UUID,
    request: ToolsUpdate,
    principal_id: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> ProjectRead:
    project = await project_service.set_tools(project_id, principal_id, request.tool_ids)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Owner only. Removes grants, comments and notifications for the project.",
    responses={
        204: {"description": "Project deleted"},
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID,
    principal_id: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> None:
    await project_service.delete_project(project_id, principal_id)
