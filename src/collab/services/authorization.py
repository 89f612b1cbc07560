"""Load a project and check the caller against the access policy."""

from uuid import UUID

from src.collab.core.access_policy import ProjectAccessFacts, require_access
from src.collab.core.errors import NotFound
from src.collab.models import AccessLevel, Operation, Project
from src.collab.repositories import ProjectAccessRepository, ProjectRepository


async def load_access_facts(
    project: Project, principal_id: UUID, access_repo: ProjectAccessRepository
) -> ProjectAccessFacts:
    """Build policy facts for one caller. The owner never needs a grant lookup."""
    grant_level: AccessLevel | None = None
    if principal_id != project.owner_id:
        grant_level = await access_repo.get_level(project.id, principal_id)
    return ProjectAccessFacts(
        owner_id=project.owner_id,
        is_public=project.is_public,
        grant_level=grant_level,
    )


async def authorize_project(
    project_id: UUID,
    principal_id: UUID,
    operation: Operation,
    project_repo: ProjectRepository,
    access_repo: ProjectAccessRepository,
) -> tuple[Project, ProjectAccessFacts]:
    """Fetch the project and require ``operation`` for ``principal_id``.

    Grant state is re-read on every call.

    Raises:
        NotFound: the project does not exist.
        Unauthorized: the policy denies the operation.
    """
    project = await project_repo.get_by_id(project_id)
    if project is None:
        raise NotFound("Project not found")
    facts = await load_access_facts(project, principal_id, access_repo)
    require_access(principal_id, facts, operation)
    return project, facts
