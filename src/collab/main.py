from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.collab.api.middlewares import setup_middlewares
from src.collab.api.v1.router import api_router
from src.collab.core.config import get_settings
from src.collab.core.db import dispose_engine, get_session
from src.collab.core.exceptions import setup_exception_handlers
from src.collab.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug, settings.log_user_emails)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "projects", "description": "Project CRUD and tool references"},
    {"name": "access", "description": "Project sharing grants"},
    {"name": "comments", "description": "Project comments"},
    {"name": "tools", "description": "Tool catalogue"},
    {"name": "notifications", "description": "In-app notifications and preferences"},
    {"name": "teams", "description": "Teams and invitations"},
    {"name": "announcements", "description": "System announcements"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Project collaboration API with access control and notifications",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check with a database round trip."""
        health_status: dict[str, Any] = {"status": "healthy", "database": "unknown"}
        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            health_status["database"] = "healthy"
        except Exception as e:
            logger.warning("Health check database failure", error=str(e))
            health_status["database"] = "unhealthy"
            health_status["status"] = "unhealthy"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    return app


app = create_app()
