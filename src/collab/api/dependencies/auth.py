"""Authentication dependencies.

Bearer tokens are issued by the external identity provider. This service
only verifies them and extracts the principal id from ``sub``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.collab.core.config import get_settings
from src.collab.core.logging import bind_principal_context
from src.collab.core.security import decode_token


async def get_current_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> UUID:
    """Validate the bearer token and return the authenticated principal id."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    payload = decode_token(authorization[7:])
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        principal_id = UUID(subject)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid subject in token",
        ) from e

    bind_principal_context(principal_id, payload.get("email"))
    return principal_id


CurrentPrincipal = Annotated[UUID, Depends(get_current_principal)]


async def require_announcer(principal_id: CurrentPrincipal) -> UUID:
    """Require a principal configured to publish system announcements."""
    if principal_id not in get_settings().announcer_ids:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Announcer access required",
        )
    return principal_id


AnnouncerPrincipal = Annotated[UUID, Depends(require_announcer)]
