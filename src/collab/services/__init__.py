from src.collab.services.comment_service import CommentService
from src.collab.services.directory import IdentityDirectory, ProfileDirectory
from src.collab.services.grant_service import GrantService
from src.collab.services.notification_dispatcher import (
    DispatchResult,
    NotificationDispatcher,
    RecipientOutcome,
    RecipientResult,
)
from src.collab.services.notification_events import NotificationEvent
from src.collab.services.notification_service import NotificationService
from src.collab.services.preference_service import PreferenceService
from src.collab.services.project_service import ProjectService
from src.collab.services.team_service import TeamService

__all__ = [
    "CommentService",
    "DispatchResult",
    "GrantService",
    "IdentityDirectory",
    "NotificationDispatcher",
    "NotificationEvent",
    "NotificationService",
    "PreferenceService",
    "ProfileDirectory",
    "ProjectService",
    "RecipientOutcome",
    "RecipientResult",
    "TeamService",
]
