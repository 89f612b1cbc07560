"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.collab.api.dependencies.db import DBSession
from src.collab.repositories import (
    CommentRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
    ProfileRepository,
    ProjectAccessRepository,
    ProjectRepository,
    TeamMemberRepository,
    TeamRepository,
    ToolRepository,
)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_access_repository(session: DBSession) -> ProjectAccessRepository:
    return ProjectAccessRepository(session)


def get_tool_repository(session: DBSession) -> ToolRepository:
    return ToolRepository(session)


def get_comment_repository(session: DBSession) -> CommentRepository:
    return CommentRepository(session)


def get_notification_repository(session: DBSession) -> NotificationRepository:
    return NotificationRepository(session)


def get_preference_repository(session: DBSession) -> NotificationPreferenceRepository:
    return NotificationPreferenceRepository(session)


def get_profile_repository(session: DBSession) -> ProfileRepository:
    return ProfileRepository(session)


def get_team_repository(session: DBSession) -> TeamRepository:
    return TeamRepository(session)


def get_team_member_repository(session: DBSession) -> TeamMemberRepository:
    return TeamMemberRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
AccessRepo = Annotated[ProjectAccessRepository, Depends(get_access_repository)]
ToolRepo = Annotated[ToolRepository, Depends(get_tool_repository)]
CommentRepo = Annotated[CommentRepository, Depends(get_comment_repository)]
NotificationRepo = Annotated[NotificationRepository, Depends(get_notification_repository)]
PreferenceRepo = Annotated[NotificationPreferenceRepository, Depends(get_preference_repository)]
ProfileRepo = Annotated[ProfileRepository, Depends(get_profile_repository)]
TeamRepo = Annotated[TeamRepository, Depends(get_team_repository)]
TeamMemberRepo = Annotated[TeamMemberRepository, Depends(get_team_member_repository)]
