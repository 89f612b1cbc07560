"""Tool catalogue endpoints."""

from fastapi import APIRouter

from src.collab.api.dependencies import CurrentPrincipal, ProjectServiceDep
from src.collab.schemas.project import ToolRead

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", response_model=list[ToolRead], summary="List tools")
async def list_tools(
    _principal: CurrentPrincipal,
    project_service: ProjectServiceDep,
) -> list[ToolRead]:
    tools = await project_service.list_tools()
    return [ToolRead.model_validate(t) for t in tools]
