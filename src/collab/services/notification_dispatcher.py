"""Notification dispatcher - fans a domain event out to recipients.

Stages run in strict order: validate the event, resolve recipients, then
deliver to each recipient independently (preferences -> persist -> email).
Only validation and recipient resolution can fail the whole dispatch;
per-recipient failures are reported in the result.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.config import Settings, get_settings
from src.collab.core.errors import DeliveryFailure, DomainError, NotFound, RecipientNotFound
from src.collab.core.logging import get_logger
from src.collab.core.notifications import EmailSender, render_notification_email
from src.collab.models import Notification, NotificationCategory
from src.collab.repositories import (
    NotificationRepository,
    ProjectAccessRepository,
    ProjectRepository,
    TeamRepository,
)
from src.collab.services.directory import IdentityDirectory
from src.collab.services.notification_events import (
    NotificationEvent,
    ValidatedEvent,
    validate_event,
)
from src.collab.services.preference_service import PreferenceService, in_app_allowed

logger = get_logger(__name__)

MAX_CONTENT_LENGTH = 1000
MAX_EXCERPT_LENGTH = 140


class RecipientOutcome(str, Enum):
    """Per-recipient result of a dispatch."""

    NOTIFIED = "notified"
    SKIPPED_BY_PREFERENCE = "skipped_by_preference"
    FAILED = "failed"


@dataclass
class RecipientResult:
    recipient_id: UUID
    outcome: RecipientOutcome
    notification_id: UUID | None = None
    email_sent: bool | None = None  # None when email was not attempted
    error_code: str | None = None
    reason: str | None = None


@dataclass
class DispatchResult:
    category: NotificationCategory
    results: list[RecipientResult] = field(default_factory=list)

    def for_recipient(self, recipient_id: UUID) -> RecipientResult | None:
        return next((r for r in self.results if r.recipient_id == recipient_id), None)

    def count(self, outcome: RecipientOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)


@dataclass(frozen=True)
class RenderedNotification:
    content: str
    subject: str
    heading: str
    action_path: str | None
    action_label: str
    metadata: dict[str, Any]
    project_id: UUID | None = None


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def _dedupe(ids: list[UUID], exclude: UUID | None) -> list[UUID]:
    seen: set[UUID] = set()
    ordered: list[UUID] = []
    for pid in ids:
        if pid == exclude or pid in seen:
            continue
        seen.add(pid)
        ordered.append(pid)
    return ordered


class NotificationDispatcher:
    """Resolves recipients for an event and delivers to each of them.

    Recipients share one database session, so they are processed one after
    another; each recipient's notification row is committed before its email
    is attempted. Re-dispatching the same event is not deduplicated.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        access_repo: ProjectAccessRepository,
        team_repo: TeamRepository,
        notification_repo: NotificationRepository,
        preference_service: PreferenceService,
        directory: IdentityDirectory,
        email_sender: EmailSender,
        session: AsyncSession,
        settings: Settings | None = None,
    ):
        self.project_repo = project_repo
        self.access_repo = access_repo
        self.team_repo = team_repo
        self.notification_repo = notification_repo
        self.preference_service = preference_service
        self.directory = directory
        self.email_sender = email_sender
        self.session = session
        self.settings = settings or get_settings()

    async def dispatch(self, event: NotificationEvent) -> DispatchResult:
        """Fan ``event`` out to its recipients.

        Raises:
            InvalidEventPayload: the event failed validation; nothing was persisted.
            NotFound: the referenced project or team does not exist.
        """
        validated = validate_event(event)
        recipients, rendered, unresolved = await self._resolve(validated)

        result = DispatchResult(category=validated.category)
        for recipient_id in recipients:
            if recipient_id in unresolved:
                logger.warning(
                    "Notification recipient not found",
                    recipient_id=str(recipient_id),
                    category=validated.category.value,
                )
                result.results.append(
                    RecipientResult(
                        recipient_id=recipient_id,
                        outcome=RecipientOutcome.FAILED,
                        error_code=RecipientNotFound.code,
                        reason="Recipient is not a known principal",
                    )
                )
                continue
            result.results.append(await self._deliver(validated, rendered, recipient_id))

        logger.info(
            "Notification dispatch complete",
            category=validated.category.value,
            recipients=len(recipients),
            notified=result.count(RecipientOutcome.NOTIFIED),
            skipped=result.count(RecipientOutcome.SKIPPED_BY_PREFERENCE),
            failed=result.count(RecipientOutcome.FAILED),
        )
        return result

    async def dispatch_after_commit(self, event: NotificationEvent) -> DispatchResult | None:
        """Dispatch for an action that has already committed.

        The action stands regardless of the outcome, so a whole-dispatch
        failure is logged and returned as None instead of raised.
        """
        try:
            return await self.dispatch(event)
        except DomainError as e:
            logger.warning(
                "Notification dispatch rejected",
                category=event.category,
                code=e.code,
                reason=e.message,
            )
            return None
        except Exception as e:
            # Fire-and-forget: the action already committed
            logger.error(
                "Notification dispatch failed",
                category=event.category,
                error=str(e),
                exc_info=e,
            )
            return None

    async def _resolve(
        self, event: ValidatedEvent
    ) -> tuple[list[UUID], RenderedNotification, set[UUID]]:
        """Resolve the recipient set and render the shared content.

        Returns:
            Tuple of (recipients, rendered, unresolved) where ``unresolved``
            holds listed recipients the directory does not know.
        """
        fields = event.fields
        unresolved: set[UUID] = set()
        actor_name = (
            await self.directory.get_display_name(event.actor_id) if event.actor_id else None
        )

        match event.category:
            case NotificationCategory.PROJECT_SHARED:
                project = await self.project_repo.get_by_id(fields["project_id"])
                if project is None:
                    raise NotFound(f"Project {fields['project_id']} not found")
                level = fields["access_level"].value
                recipients = _dedupe([fields["grantee_id"]], exclude=event.actor_id)
                rendered = RenderedNotification(
                    content=f'{actor_name} shared the project "{project.name}" with you '
                    f"({level} access)",
                    subject=f'{actor_name} shared "{project.name}" with you',
                    heading="A project was shared with you",
                    action_path=f"/projects/{project.id}",
                    action_label="Open Project",
                    metadata={
                        "project_id": str(project.id),
                        "project_name": project.name,
                        "actor_id": str(event.actor_id),
                        "access_level": level,
                    },
                    project_id=project.id,
                )

            case NotificationCategory.COMMENT_ADDED:
                project = await self.project_repo.get_by_id(fields["project_id"])
                if project is None:
                    raise NotFound(f"Project {fields['project_id']} not found")
                grants = await self.access_repo.list_by_project(project.id)
                recipients = _dedupe(
                    [project.owner_id, *(g.user_id for g in grants)], exclude=event.actor_id
                )
                content = f'{actor_name} commented on "{project.name}"'
                excerpt = fields.get("excerpt")
                if excerpt:
                    content = f"{content}: {_truncate(excerpt, MAX_EXCERPT_LENGTH)}"
                rendered = RenderedNotification(
                    content=content,
                    subject=f'New comment on "{project.name}"',
                    heading="New comment",
                    action_path=f"/projects/{project.id}#comment-{fields['comment_id']}",
                    action_label="View Comment",
                    metadata={
                        "project_id": str(project.id),
                        "project_name": project.name,
                        "actor_id": str(event.actor_id),
                        "comment_id": str(fields["comment_id"]),
                    },
                    project_id=project.id,
                )

            case NotificationCategory.TEAM_INVITATION:
                team = await self.team_repo.get_by_id(fields["team_id"])
                if team is None:
                    raise NotFound(f"Team {fields['team_id']} not found")
                recipients = _dedupe([fields["invitee_id"]], exclude=event.actor_id)
                metadata = {
                    "team_id": str(team.id),
                    "team_name": team.name,
                    "actor_id": str(event.actor_id),
                }
                if fields.get("role"):
                    metadata["role"] = fields["role"]
                rendered = RenderedNotification(
                    content=f'{actor_name} invited you to join the team "{team.name}"',
                    subject=f'You\'ve been invited to join "{team.name}"',
                    heading="You're invited!",
                    action_path=f"/teams/{team.id}",
                    action_label="View Team",
                    metadata=metadata,
                )

            case NotificationCategory.SYSTEM_ANNOUNCEMENT:
                recipients = _dedupe(fields["recipient_ids"], exclude=event.actor_id)
                known = await self.directory.existing_principals(recipients)
                unresolved = {pid for pid in recipients if pid not in known}
                rendered = RenderedNotification(
                    content=f"{fields['title']}: {fields['message']}",
                    subject=fields["title"],
                    heading=fields["title"],
                    action_path=None,
                    action_label="Open",
                    metadata={"title": fields["title"]},
                )

        return recipients, rendered, unresolved

    async def _deliver(
        self, event: ValidatedEvent, rendered: RenderedNotification, recipient_id: UUID
    ) -> RecipientResult:
        """Preference check, then persist, then email, for one recipient."""
        try:
            preferences = await self.preference_service.get_preferences(recipient_id)
        except Exception as e:
            logger.error(
                "Failed to load notification preferences",
                recipient_id=str(recipient_id),
                error=str(e),
            )
            return RecipientResult(
                recipient_id=recipient_id,
                outcome=RecipientOutcome.FAILED,
                error_code="preference_lookup_failure",
                reason=str(e),
            )

        in_app = in_app_allowed(preferences, event.category)
        notification_id: UUID | None = None

        if in_app:
            try:
                notification = await self.notification_repo.insert(
                    Notification(
                        recipient_id=recipient_id,
                        category=event.category.value,
                        content=_truncate(rendered.content, MAX_CONTENT_LENGTH),
                        payload=rendered.metadata,
                        project_id=rendered.project_id,
                    )
                )
                await self.session.commit()
                notification_id = notification.id
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to persist notification",
                    recipient_id=str(recipient_id),
                    category=event.category.value,
                    error=str(e),
                )
                return RecipientResult(
                    recipient_id=recipient_id,
                    outcome=RecipientOutcome.FAILED,
                    error_code="persistence_failure",
                    reason=str(e),
                )

        outcome = RecipientOutcome.NOTIFIED if in_app else RecipientOutcome.SKIPPED_BY_PREFERENCE

        if not preferences.email_enabled:
            return RecipientResult(
                recipient_id=recipient_id, outcome=outcome, notification_id=notification_id
            )

        try:
            await self._send_email(recipient_id, rendered)
        except DeliveryFailure as e:
            logger.warning(
                "Notification email failed",
                recipient_id=str(recipient_id),
                category=event.category.value,
                reason=e.message,
            )
            return RecipientResult(
                recipient_id=recipient_id,
                outcome=RecipientOutcome.FAILED,
                notification_id=notification_id,
                email_sent=False,
                error_code=e.code,
                reason=e.message,
            )

        return RecipientResult(
            recipient_id=recipient_id,
            outcome=outcome,
            notification_id=notification_id,
            email_sent=True,
        )

    async def _send_email(self, recipient_id: UUID, rendered: RenderedNotification) -> None:
        """Send one notification email.

        Raises:
            DeliveryFailure: no contact address, a lookup or render error, the
                sender raised, or it returned False.
        """
        try:
            address = await self.directory.get_contact_address(recipient_id)
            if not address:
                raise DeliveryFailure("Recipient has no contact address")

            recipient_name = await self.directory.get_display_name(recipient_id)
            action_url = (
                f"{self.settings.app_url}{rendered.action_path}" if rendered.action_path else None
            )
            message = render_notification_email(
                subject=rendered.subject,
                heading=rendered.heading,
                message=rendered.content,
                recipient_name=recipient_name,
                action_url=action_url,
                action_label=rendered.action_label,
            )

            sent = await asyncio.to_thread(
                self.email_sender.send, address, message.subject, message.html_body
            )
        except DeliveryFailure:
            raise
        except Exception as e:
            raise DeliveryFailure(f"Email delivery raised: {e}") from e
        if not sent:
            raise DeliveryFailure("Email sender reported failure")
