"""Shared enums for models."""

from enum import Enum


class AccessLevel(str, Enum):
    """Level granted to a non-owner on a shared project."""

    VIEW = "view"
    EDIT = "edit"


class Operation(str, Enum):
    """Operations checked by the access policy."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    MANAGE_GRANTS = "manage_grants"


class ToolType(str, Enum):
    """Tool catalogue categories."""

    GENERATOR = "generator"
    TIME = "time"
    NOTES = "notes"
    UTILITY = "utility"


class NotificationCategory(str, Enum):
    """Closed set of notification categories."""

    PROJECT_SHARED = "project_shared"
    COMMENT_ADDED = "comment_added"
    TEAM_INVITATION = "team_invitation"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class TeamRole(str, Enum):
    """Role within a team. Unrelated to project access levels."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
