"""Repository layer - data access abstraction."""

from src.collab.repositories.access import ProjectAccessRepository
from src.collab.repositories.base import BaseRepository
from src.collab.repositories.notification import (
    NotificationPreferenceRepository,
    NotificationRepository,
)
from src.collab.repositories.profile import ProfileRepository
from src.collab.repositories.project import (
    CommentRepository,
    ProjectRepository,
    ToolRepository,
)
from src.collab.repositories.team import TeamMemberRepository, TeamRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "ProfileRepository",
    "ProjectAccessRepository",
    "ProjectRepository",
    "TeamMemberRepository",
    "TeamRepository",
    "ToolRepository",
]
