"""Security utilities.

Re-exports token helpers for convenience.
"""

from src.collab.core.security.crypto import (
    DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    create_access_token,
    decode_token,
)

__all__ = [
    "DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES",
    "create_access_token",
    "decode_token",
]
