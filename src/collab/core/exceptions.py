"""Exception handlers. Every error body carries the request_id."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.collab.core.errors import DomainError
from src.collab.core.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, detail: Any, code: str | None = None) -> JSONResponse:
    """Build the JSON error body shared by all handlers."""
    content: dict[str, Any] = {"detail": detail}
    if code is not None:
        content["code"] = code
    content["request_id"] = correlation_id.get()
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def setup_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to their status codes and attach request_id everywhere."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        logger.info(
            "Request rejected",
            code=exc.code,
            status=exc.status_code,
            path=request.url.path,
        )
        return error_response(exc.status_code, exc.message, exc.code)

    # fastapi.HTTPException subclasses Starlette's, so this covers both.
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = error_response(exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(422, exc.errors(), "validation_error")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return error_response(500, "Internal server error")
