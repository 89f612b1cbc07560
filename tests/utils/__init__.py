"""Test utilities package."""

from tests.utils.cleanup import cleanup_principals, cleanup_project_cascade

__all__ = [
    "cleanup_principals",
    "cleanup_project_cascade",
]
