"""Notification and preference endpoints.

Every route acts on the caller's own notifications only.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.collab.api.dependencies import (
    CurrentPrincipal,
    NotificationServiceDep,
    PreferenceServiceDep,
)
from src.collab.schemas.notification import (
    MarkAllReadResponse,
    NotificationPreferences,
    NotificationRead,
    PreferenceUpdate,
    UnreadCountResponse,
)
from src.collab.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=PaginatedResponse[NotificationRead],
    summary="List notifications",
    description="Active notifications, newest first.",
)
async def list_notifications(
    principal_id: CurrentPrincipal,
    notification_service: NotificationServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int | None, Query(ge=1, description="Max items to return")] = None,
) -> PaginatedResponse[NotificationRead]:
    items, next_cursor, has_more = await notification_service.list(
        principal_id, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[NotificationRead.model_validate(n) for n in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread count")
async def unread_count(
    principal_id: CurrentPrincipal,
    notification_service: NotificationServiceDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await notification_service.unread_count(principal_id))


@router.get(
    "/preferences",
    response_model=NotificationPreferences,
    summary="Get notification preferences",
    description="Returns all-enabled defaults when nothing has been saved yet.",
)
async def get_preferences(
    principal_id: CurrentPrincipal,
    preference_service: PreferenceServiceDep,
) -> NotificationPreferences:
    return await preference_service.get_preferences(principal_id)


@router.patch(
    "/preferences",
    response_model=NotificationPreferences,
    summary="Update notification preferences",
    description="Omitted toggles are left unchanged.",
)
async def update_preferences(
    request: PreferenceUpdate,
    principal_id: CurrentPrincipal,
    preference_service: PreferenceServiceDep,
) -> NotificationPreferences:
    return await preference_service.update_preferences(principal_id, request)


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark all read")
async def mark_all_read(
    principal_id: CurrentPrincipal,
    notification_service: NotificationServiceDep,
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await notification_service.mark_all_read(principal_id))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark notification read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(
    notification_id: UUID,
    principal_id: CurrentPrincipal,
    notification_service: NotificationServiceDep,
) -> NotificationRead:
    notification = await notification_service.mark_read(notification_id, principal_id)
    return NotificationRead.model_validate(notification)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(
    notification_id: UUID,
    principal_id: CurrentPrincipal,
    notification_service: NotificationServiceDep,
) -> None:
    await notification_service.soft_delete(notification_id, principal_id)
