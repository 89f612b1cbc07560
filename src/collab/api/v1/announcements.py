"""System announcement endpoint."""

from fastapi import APIRouter, status

from src.collab.api.dependencies import AnnouncerPrincipal, DispatcherDep
from src.collab.schemas.notification import (
    AnnouncementCreate,
    DispatchResultRead,
    RecipientResultRead,
)
from src.collab.services.notification_events import NotificationEvent

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.post(
    "",
    response_model=DispatchResultRead,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Publish announcement",
    description="Configured announcers only. Returns the per-recipient delivery outcome.",
    responses={403: {"description": "Caller is not an announcer"}},
)
async def publish_announcement(
    request: AnnouncementCreate,
    principal_id: AnnouncerPrincipal,
    dispatcher: DispatcherDep,
) -> DispatchResultRead:
    result = await dispatcher.dispatch(
        NotificationEvent.system_announcement(
            title=request.title,
            message=request.message,
            recipient_ids=request.recipient_ids,
            actor_id=principal_id,
        )
    )
    return DispatchResultRead(
        category=result.category.value,
        results=[
            RecipientResultRead(
                recipient_id=r.recipient_id,
                outcome=r.outcome.value,
                notification_id=r.notification_id,
                email_sent=r.email_sent,
                error_code=r.error_code,
                reason=r.reason,
            )
            for r in result.results
        ],
    )
