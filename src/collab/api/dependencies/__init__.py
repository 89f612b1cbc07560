"""FastAPI dependency injection definitions.

Re-exports all dependencies so routers import from one place.
"""

# Auth
from src.collab.api.dependencies.auth import (
    AnnouncerPrincipal,
    CurrentPrincipal,
    get_current_principal,
    require_announcer,
)

# Database
from src.collab.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.collab.api.dependencies.repositories import (
    AccessRepo,
    CommentRepo,
    NotificationRepo,
    PreferenceRepo,
    ProfileRepo,
    ProjectRepo,
    TeamMemberRepo,
    TeamRepo,
    ToolRepo,
)

# Services
from src.collab.api.dependencies.services import (
    CommentServiceDep,
    DirectoryDep,
    DispatcherDep,
    EmailSenderDep,
    GrantServiceDep,
    NotificationServiceDep,
    PreferenceServiceDep,
    ProjectServiceDep,
    TeamServiceDep,
    get_directory,
    get_dispatcher,
    get_email_sender,
)

__all__ = [
    # Auth
    "AnnouncerPrincipal",
    "CurrentPrincipal",
    "get_current_principal",
    "require_announcer",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "AccessRepo",
    "CommentRepo",
    "NotificationRepo",
    "PreferenceRepo",
    "ProfileRepo",
    "ProjectRepo",
    "TeamMemberRepo",
    "TeamRepo",
    "ToolRepo",
    # Services
    "CommentServiceDep",
    "DirectoryDep",
    "DispatcherDep",
    "EmailSenderDep",
    "GrantServiceDep",
    "NotificationServiceDep",
    "PreferenceServiceDep",
    "ProjectServiceDep",
    "TeamServiceDep",
    "get_directory",
    "get_dispatcher",
    "get_email_sender",
]
