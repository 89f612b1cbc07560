"""Domain error taxonomy.

Services raise these; the API layer maps them to HTTP responses by type
(see core/exceptions.py). Callers branch on the class or on ``code``,
never on the message.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    code: str = "domain_error"
    status_code: int = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class Unauthorized(DomainError):
    """Caller is not permitted to perform this operation."""

    code = "unauthorized"
    status_code = 403


class NotFound(DomainError):
    """Referenced resource does not exist."""

    code = "not_found"
    status_code = 404


class NotFoundOrForbidden(NotFound):
    """Resource does not exist or does not belong to the caller."""

    code = "not_found_or_forbidden"


class RecipientNotFound(DomainError):
    """Target principal could not be resolved."""

    code = "recipient_not_found"
    status_code = 404


class InvalidGrant(DomainError):
    """Grant targets the project owner or uses an unknown access level."""

    code = "invalid_grant"
    status_code = 422


class InvalidEventPayload(DomainError):
    """Notification event is missing or has malformed fields."""

    code = "invalid_event_payload"
    status_code = 422


class ConstraintViolation(DomainError):
    """A uniqueness constraint rejected the write."""

    code = "constraint_violation"
    status_code = 409


class DeliveryFailure(DomainError):
    """Email delivery to a recipient failed."""

    code = "delivery_failure"
    status_code = 502
