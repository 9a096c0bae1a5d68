"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from guestbook.api.router import api_router
from guestbook.core.config import settings
from guestbook.core.error_responses import ErrorMessages, error_body
from guestbook.core.error_tracking import capture_error, init_error_tracking
from guestbook.core.logging_config import setup_logging
from guestbook.middleware import (
    CORSHeadersMiddleware,
    RequestLoggingMiddleware,
    build_cors_headers,
)
from guestbook.storage import CommentStore, create_comment_store

# Initialize logging configuration at startup
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    - On startup: initializes error tracking and runs the store's one-time
      schema initialization (failures are logged, the app still starts)
    - On shutdown: releases the store's connections
    """
    init_error_tracking(settings)

    store: CommentStore = app.state.comment_store
    if await store.initialize():
        logger.info(f"Comment store ready (storage={store.backend_name})")
    else:
        logger.warning(
            f"Comment store initialization failed (storage={store.backend_name}); "
            "requests may fail until it succeeds"
        )

    yield

    await store.close()
    logger.info("Application shutting down - comment store closed")


tags_metadata = [
    {
        "name": "health",
        "description": "Service status and comment count",
    },
    {
        "name": "comments",
        "description": "List, submit, delete and clean up guestbook comments",
    },
    {
        "name": "admin",
        "description": "Database inspection",
    },
]


def _serialize_validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
        )
    return errors


def create_application(store: Optional[CommentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Comment store to serve from; defaults to the backend selected
            by ``STORAGE_BACKEND``
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "**Guestbook API** - list, submit and manage guestbook comments.\n\n"
            "Comments are served from an in-memory list or a database table, "
            "selected with `STORAGE_BACKEND`. Delete, cleanup and admin "
            "endpoints are only available with the database backend."
        ),
        openapi_tags=tags_metadata,
    )
    app.state.comment_store = store if store is not None else create_comment_store()

    # CORS headers on every response; OPTIONS answered without routing
    app.add_middleware(
        CORSHeadersMiddleware,
        allow_origin=settings.CORS_ALLOW_ORIGIN,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    # Added last so it is outermost and logs preflights as well
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Render HTTP errors as ``{"error": ...}`` JSON.

        Unknown paths and unsupported methods on known paths are both
        reported as a missing endpoint.
        """
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        ) and not isinstance(exc.detail, dict):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=error_body(ErrorMessages.ENDPOINT_NOT_FOUND),
            )

        if exc.status_code >= 500:
            capture_error(
                exc,
                context={
                    "path": str(request.url.path),
                    "method": request.method,
                    "status_code": exc.status_code,
                },
            )

        content = exc.detail if isinstance(exc.detail, dict) else error_body(str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle malformed request bodies and query parameters with a 400.
        """
        errors = _serialize_validation_errors(exc)
        logger.info(f"Rejected invalid request to {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ErrorMessages.INVALID_REQUEST, errors),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id (UUID) for each exception so a report
        from a client can be matched to the logged traceback.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={"error_id": error_id},
        )

        capture_error(
            exc,
            context={
                "path": str(request.url.path),
                "method": request.method,
                "error_id": error_id,
            },
        )

        # Don't leak internal details
        body = error_body(ErrorMessages.INTERNAL_ERROR)
        body["error_id"] = error_id
        # Rendered outside the middleware stack, so CORS headers are added here
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body,
            headers=build_cors_headers(),
        )

    return app


app = create_application()
