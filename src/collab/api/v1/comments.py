"""Project comment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.collab.api.dependencies import CommentServiceDep, CurrentPrincipal, DirectoryDep
from src.collab.schemas.pagination import PaginatedResponse
from src.collab.schemas.project import CommentCreate, CommentRead

router = APIRouter(prefix="/projects/{project_id}/comments", tags=["comments"])


@router.get(
    "",
    response_model=PaginatedResponse[CommentRead],
    summary="List comments",
    responses={
        403: {"description": "Caller cannot read this project"},
        404: {"description": "Project not found"},
    },
)
async def list_comments(
    project_id: UUID,
    principal_id: CurrentPrincipal,
    comment_service: CommentServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int | None, Query(ge=1, description="Max items to return")] = None,
) -> PaginatedResponse[CommentRead]:
    views, next_cursor, has_more = await comment_service.list_comments(
        project_id, principal_id, cursor=cursor, limit=limit
    )
    items = []
    for view in views:
        comment = CommentRead.model_validate(view.comment)
        comment.author_name = view.author_name
        items.append(comment)
    return PaginatedResponse(items=items, next_cursor=next_cursor, has_more=has_more)


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
    description="Anyone who can read the project may comment. Collaborators are notified.",
    responses={
        201: {"description": "Comment added"},
        403: {"description": "Caller cannot read this project"},
        404: {"description": "Project not found"},
    },
)
async def add_comment(
    project_id: UUID,
    request: CommentCreate,
    principal_id: CurrentPrincipal,
    comment_service: CommentServiceDep,
    directory: DirectoryDep,
) -> CommentRead:
    comment, _ = await comment_service.add_comment(project_id, principal_id, request.body)
    result = CommentRead.model_validate(comment)
    result.author_name = await directory.get_display_name(principal_id)
    return result
