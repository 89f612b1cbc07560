from fastapi import APIRouter

from src.collab.api.v1 import (
    access,
    announcements,
    comments,
    notifications,
    projects,
    teams,
    tools,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(projects.router)
api_router.include_router(access.router)
api_router.include_router(comments.router)
api_router.include_router(tools.router)
api_router.include_router(notifications.router)
api_router.include_router(teams.router)
api_router.include_router(announcements.router)
