"""Typed domain events accepted by the notification dispatcher."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any
from uuid import UUID

from pydantic import StringConstraints, TypeAdapter, ValidationError, conlist

from src.collab.core.errors import InvalidEventPayload
from src.collab.models import AccessLevel, NotificationCategory

_NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Required payload fields per category and the type each must coerce to.
REQUIRED_FIELDS: dict[NotificationCategory, dict[str, Any]] = {
    NotificationCategory.PROJECT_SHARED: {
        "project_id": UUID,
        "grantee_id": UUID,
        "access_level": AccessLevel,
    },
    NotificationCategory.COMMENT_ADDED: {
        "project_id": UUID,
        "comment_id": UUID,
    },
    NotificationCategory.TEAM_INVITATION: {
        "team_id": UUID,
        "invitee_id": UUID,
    },
    NotificationCategory.SYSTEM_ANNOUNCEMENT: {
        "title": _NonEmptyStr,
        "message": _NonEmptyStr,
        "recipient_ids": conlist(UUID, min_length=1),
    },
}

# Optional payload fields carried through to rendering when present.
OPTIONAL_FIELDS: dict[NotificationCategory, dict[str, Any]] = {
    NotificationCategory.COMMENT_ADDED: {"excerpt": str},
    NotificationCategory.TEAM_INVITATION: {"role": str},
}

ACTOR_REQUIRED: frozenset[NotificationCategory] = frozenset(
    {
        NotificationCategory.PROJECT_SHARED,
        NotificationCategory.COMMENT_ADDED,
        NotificationCategory.TEAM_INVITATION,
    }
)


@dataclass(frozen=True)
class NotificationEvent:
    """An event as submitted by the action that triggered it."""

    category: str
    actor_id: UUID | None = None
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def project_shared(
        cls, project_id: UUID, actor_id: UUID, grantee_id: UUID, level: AccessLevel | str
    ) -> "NotificationEvent":
        return cls(
            category=NotificationCategory.PROJECT_SHARED.value,
            actor_id=actor_id,
            payload={
                "project_id": project_id,
                "grantee_id": grantee_id,
                "access_level": AccessLevel(level).value,
            },
        )

    @classmethod
    def comment_added(
        cls, project_id: UUID, actor_id: UUID, comment_id: UUID, excerpt: str | None = None
    ) -> "NotificationEvent":
        payload: dict[str, Any] = {"project_id": project_id, "comment_id": comment_id}
        if excerpt:
            payload["excerpt"] = excerpt
        return cls(
            category=NotificationCategory.COMMENT_ADDED.value,
            actor_id=actor_id,
            payload=payload,
        )

    @classmethod
    def team_invitation(
        cls, team_id: UUID, actor_id: UUID, invitee_id: UUID, role: str | None = None
    ) -> "NotificationEvent":
        payload: dict[str, Any] = {"team_id": team_id, "invitee_id": invitee_id}
        if role:
            payload["role"] = role
        return cls(
            category=NotificationCategory.TEAM_INVITATION.value,
            actor_id=actor_id,
            payload=payload,
        )

    @classmethod
    def system_announcement(
        cls,
        title: str,
        message: str,
        recipient_ids: list[UUID],
        actor_id: UUID | None = None,
    ) -> "NotificationEvent":
        return cls(
            category=NotificationCategory.SYSTEM_ANNOUNCEMENT.value,
            actor_id=actor_id,
            payload={"title": title, "message": message, "recipient_ids": list(recipient_ids)},
        )


@dataclass(frozen=True)
class ValidatedEvent:
    """Event whose category is known and whose fields are coerced."""

    category: NotificationCategory
    actor_id: UUID | None
    fields: dict[str, Any]


def _coerce(category: NotificationCategory, name: str, type_: Any, value: Any) -> Any:
    try:
        return TypeAdapter(type_).validate_python(value)
    except ValidationError as e:
        raise InvalidEventPayload(
            f"Field '{name}' is malformed for category '{category.value}'"
        ) from e


def validate_event(event: NotificationEvent) -> ValidatedEvent:
    """Check category and required fields.

    Raises:
        InvalidEventPayload: unknown category, missing actor, or a missing or
            malformed payload field.
    """
    try:
        category = NotificationCategory(event.category)
    except ValueError as e:
        raise InvalidEventPayload(f"Unknown notification category '{event.category}'") from e

    if category in ACTOR_REQUIRED and event.actor_id is None:
        raise InvalidEventPayload(f"Category '{category.value}' requires an actor")

    fields: dict[str, Any] = {}
    for name, type_ in REQUIRED_FIELDS[category].items():
        value = event.payload.get(name)
        if value is None:
            raise InvalidEventPayload(
                f"Missing required field '{name}' for category '{category.value}'"
            )
        fields[name] = _coerce(category, name, type_, value)

    for name, type_ in OPTIONAL_FIELDS.get(category, {}).items():
        value = event.payload.get(name)
        if value is not None:
            fields[name] = _coerce(category, name, type_, value)

    return ValidatedEvent(category=category, actor_id=event.actor_id, fields=fields)
