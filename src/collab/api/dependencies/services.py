"""Service factory dependencies.

Collaborators (directory, email sender, dispatcher) are built here and
injected into services; nothing in the core holds a client singleton.
"""

from typing import Annotated

from fastapi import Depends

from src.collab.api.dependencies.db import DBSession
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
from src.collab.core.notifications import EmailSender, ResendEmailSender
from src.collab.services import (
    CommentService,
    GrantService,
    IdentityDirectory,
    NotificationDispatcher,
    NotificationService,
    PreferenceService,
    ProfileDirectory,
    ProjectService,
    TeamService,
)


def get_email_sender() -> EmailSender:
    """Get the email collaborator."""
    return ResendEmailSender()


def get_directory(profile_repo: ProfileRepo) -> IdentityDirectory:
    """Get the identity/profile directory."""
    return ProfileDirectory(profile_repo)


EmailSenderDep = Annotated[EmailSender, Depends(get_email_sender)]
DirectoryDep = Annotated[IdentityDirectory, Depends(get_directory)]


def get_preference_service(
    preference_repo: PreferenceRepo, session: DBSession
) -> PreferenceService:
    return PreferenceService(preference_repo, session)


PreferenceServiceDep = Annotated[PreferenceService, Depends(get_preference_service)]


def get_dispatcher(
    project_repo: ProjectRepo,
    access_repo: AccessRepo,
    team_repo: TeamRepo,
    notification_repo: NotificationRepo,
    preference_service: PreferenceServiceDep,
    directory: DirectoryDep,
    email_sender: EmailSenderDep,
    session: DBSession,
) -> NotificationDispatcher:
    """Get the notification dispatcher with all collaborators injected."""
    return NotificationDispatcher(
        project_repo=project_repo,
        access_repo=access_repo,
        team_repo=team_repo,
        notification_repo=notification_repo,
        preference_service=preference_service,
        directory=directory,
        email_sender=email_sender,
        session=session,
    )


DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]


def get_project_service(
    project_repo: ProjectRepo,
    access_repo: AccessRepo,
    tool_repo: ToolRepo,
    comment_repo: CommentRepo,
    notification_repo: NotificationRepo,
    session: DBSession,
) -> ProjectService:
    return ProjectService(
        project_repo, access_repo, tool_repo, comment_repo, notification_repo, session
    )


def get_grant_service(
    access_repo: AccessRepo,
    project_repo: ProjectRepo,
    directory: DirectoryDep,
    dispatcher: DispatcherDep,
    session: DBSession,
) -> GrantService:
    return GrantService(access_repo, project_repo, directory, dispatcher, session)


def get_comment_service(
    comment_repo: CommentRepo,
    project_repo: ProjectRepo,
    access_repo: AccessRepo,
    directory: DirectoryDep,
    dispatcher: DispatcherDep,
    session: DBSession,
) -> CommentService:
    return CommentService(comment_repo, project_repo, access_repo, directory, dispatcher, session)


def get_notification_service(
    notification_repo: NotificationRepo, session: DBSession
) -> NotificationService:
    return NotificationService(notification_repo, session)


def get_team_service(
    team_repo: TeamRepo,
    member_repo: TeamMemberRepo,
    directory: DirectoryDep,
    dispatcher: DispatcherDep,
    session: DBSession,
) -> TeamService:
    return TeamService(team_repo, member_repo, directory, dispatcher, session)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
GrantServiceDep = Annotated[GrantService, Depends(get_grant_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
