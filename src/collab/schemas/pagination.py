"""Keyset pagination: response envelope and opaque cursors.

A cursor pins the last row of a page by ``(created_at, id)`` so rows that
share a timestamp are neither skipped nor repeated.
"""

import base64
import binascii
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

_SEPARATOR = "|"


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items, newest first."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for the next page. None on the last page.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether older items exist after this page.",
    )


def encode_cursor(created_at: datetime, row_id: UUID) -> str:
    """Encode the position of the last row on a page."""
    raw = f"{created_at.isoformat()}{_SEPARATOR}{row_id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor produced by ``encode_cursor``.

    Raises:
        ValueError: the cursor is not one this service issued.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        created_part, id_part = raw.split(_SEPARATOR, 1)
        return datetime.fromisoformat(created_part), UUID(id_part)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ValueError("Invalid cursor") from e
