"""Model exports.

Import from here: `from src.collab.models import Project, ProjectAccess`
"""

from src.collab.models.access import GRANT_PAIR_CONSTRAINT, ProjectAccess
from src.collab.models.enums import (
    AccessLevel,
    NotificationCategory,
    Operation,
    TeamRole,
    ToolType,
)
from src.collab.models.notification import Notification, NotificationPreference
from src.collab.models.profile import Profile
from src.collab.models.project import Project, ProjectComment, Tool
from src.collab.models.team import Team, TeamMember

__all__ = [
    # Enums
    "AccessLevel",
    "NotificationCategory",
    "Operation",
    "TeamRole",
    "ToolType",
    # Models
    "Notification",
    "NotificationPreference",
    "Profile",
    "Project",
    "ProjectAccess",
    "ProjectComment",
    "Team",
    "TeamMember",
    "Tool",
    # Constraints
    "GRANT_PAIR_CONSTRAINT",
]
