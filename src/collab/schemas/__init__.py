from src.collab.schemas.access import GrantCreate, GrantRead, GrantUpsertResponse
from src.collab.schemas.notification import (
    AnnouncementCreate,
    DispatchResultRead,
    MarkAllReadResponse,
    NotificationPreferences,
    NotificationRead,
    PreferenceUpdate,
    RecipientResultRead,
    UnreadCountResponse,
)
from src.collab.schemas.pagination import PaginatedResponse
from src.collab.schemas.project import (
    AccessibleProjectRead,
    CommentCreate,
    CommentRead,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    ToolRead,
    ToolsUpdate,
)
from src.collab.schemas.team import (
    TeamCreate,
    TeamInvitationCreate,
    TeamListItem,
    TeamMemberRead,
    TeamRead,
)

__all__ = [
    # Access
    "GrantCreate",
    "GrantRead",
    "GrantUpsertResponse",
    # Notifications
    "AnnouncementCreate",
    "DispatchResultRead",
    "MarkAllReadResponse",
    "NotificationPreferences",
    "NotificationRead",
    "PreferenceUpdate",
    "RecipientResultRead",
    "UnreadCountResponse",
    # Pagination
    "PaginatedResponse",
    # Projects
    "AccessibleProjectRead",
    "CommentCreate",
    "CommentRead",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    "ToolRead",
    "ToolsUpdate",
    # Teams
    "TeamCreate",
    "TeamInvitationCreate",
    "TeamListItem",
    "TeamMemberRead",
    "TeamRead",
]
