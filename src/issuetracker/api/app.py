"""FastAPI application setup."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from issuetracker import __version__
from issuetracker.api.models import (
    FieldErrorResponse,
    MessageResponse,
    ValidationErrorResponse,
    error_response,
)
from issuetracker.api.routes import health, issues
from issuetracker.config import Settings
from issuetracker.issues import IssueValidationError
from issuetracker.logging import get_logger
from issuetracker.store import IssueNotFoundError, IssueStore, StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence

    from fastapi import Response

logger = get_logger("api")
request_logger = get_logger("api.requests")

API_PREFIX = "/api"

_REQUEST_SECTIONS = ("body", "path", "query", "header", "cookie")


def _request_error_fields(errors: Sequence[dict]) -> list[FieldErrorResponse]:
    """Flatten FastAPI request errors into field/message pairs."""
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if error.get("type") == "json_invalid":
            # loc carries the byte offset of the decode failure
            loc = []
        elif loc and loc[0] in _REQUEST_SECTIONS and len(loc) > 1:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        fields.append(FieldErrorResponse(field=field, message=error.get("msg", "Invalid value")))
    return fields


def _log_request(request: Request, status_code: int, started: float) -> None:
    elapsed_ms = (time.perf_counter() - started) * 1000
    request_logger.info(
        "%s %s %d %.1fms", request.method, request.url.path, status_code, elapsed_ms
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the IssueStore from settings unless one was supplied to create_app,
    and closes it again on shutdown.
    """
    # Startup
    owns_store = app.state.store is None
    if owns_store:
        settings: Settings = app.state.settings
        app.state.store = IssueStore(settings.db_path)
        logger.info("Opened issue store at %s", settings.db_path)

    yield
    # Shutdown
    if owns_store:
        app.state.store.close()
        app.state.store = None
        logger.info("Closed issue store")


def create_app(settings: Settings | None = None, store: IssueStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service settings. Read from the environment when omitted.
        store: Pre-built IssueStore. When given, the caller owns its lifetime.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Issue Tracker API",
        description="REST API for creating, listing, updating and deleting issues",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _log_request(request, status.HTTP_500_INTERNAL_SERVER_ERROR, started)
            raise
        _log_request(request, response.status_code, started)
        return response

    # Exception handlers
    @app.exception_handler(IssueValidationError)
    async def issue_validation_handler(
        _request: Request, exc: IssueValidationError
    ) -> JSONResponse:
        body = ValidationErrorResponse(
            errors=[FieldErrorResponse(field=e.field, message=e.message) for e in exc.errors]
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ValidationErrorResponse(errors=_request_error_fields(exc.errors()))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    @app.exception_handler(IssueNotFoundError)
    async def issue_not_found_handler(
        request: Request, exc: IssueNotFoundError
    ) -> JSONResponse:
        logger.debug("Issue %s not found (%s %s)", exc.issue_id, request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=MessageResponse(message="Issue not found").model_dump(),
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response("Internal server error"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response("Internal server error"),
        )

    @app.get("/", include_in_schema=False)
    def root() -> MessageResponse:
        return MessageResponse(message="Issue Tracker Backend Running!")

    # Include routers
    app.include_router(issues.router, prefix=API_PREFIX)
    app.include_router(health.router, prefix=API_PREFIX)

    return app

