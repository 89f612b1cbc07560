"""Project access policy.

Pure decision functions: callers fetch the project and the caller's grant,
then ask. No I/O happens here, so every rule is unit-testable.
"""

from dataclasses import dataclass
from uuid import UUID

from src.collab.core.errors import Unauthorized
from src.collab.models.enums import AccessLevel, Operation


@dataclass(frozen=True, slots=True)
class ProjectAccessFacts:
    """Everything the policy needs to know about one project for one caller."""

    owner_id: UUID
    is_public: bool = False
    grant_level: AccessLevel | None = None


def can_access(principal_id: UUID | None, facts: ProjectAccessFacts, operation: Operation) -> bool:
    """Decide whether ``principal_id`` may perform ``operation``.

    Rules are evaluated in order and the first match wins; anything
    unmatched is denied.
    """
    if principal_id is None:
        return False

    if principal_id == facts.owner_id:
        return True

    if operation == Operation.READ:
        return facts.grant_level is not None or facts.is_public

    if operation == Operation.WRITE:
        return facts.grant_level == AccessLevel.EDIT

    # MANAGE_GRANTS and DELETE are owner-only
    return False


def require_access(
    principal_id: UUID | None, facts: ProjectAccessFacts, operation: Operation
) -> None:
    """Raise Unauthorized unless ``can_access`` allows the operation."""
    if not can_access(principal_id, facts, operation):
        raise Unauthorized(f"Not permitted to {operation.value.replace('_', ' ')} this project")
