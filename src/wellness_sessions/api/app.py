"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wellness_sessions.api.models import ApiResponse, FieldErrorOut
from wellness_sessions.api.sessions import router as sessions_router
from wellness_sessions.app_logging import configure_logging
from wellness_sessions.containers import AppContainer
from wellness_sessions.errors import (
    AuthError,
    NotFoundError,
    StoreError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(sessions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return _envelope(
            status.HTTP_400_BAD_REQUEST,
            exc.message,
            errors=[
                FieldErrorOut(field=v.field, message=v.message)
                for v in exc.violations
            ],
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(
            status.HTTP_400_BAD_REQUEST,
            "Validation errors",
            errors=[
                FieldErrorOut(field=_error_field(error), message=error["msg"])
                for error in exc.errors()
            ],
        )

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return _envelope(status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _envelope(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Session store failure",
            extra={"path": request.url.path, "method": request.method},
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _server_error_message(container, exc),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            extra={"path": request.url.path, "method": request.method},
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _server_error_message(container, exc),
        )

    return app


def _envelope(
    status_code: int, message: str, errors: list[FieldErrorOut] | None = None
) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def _error_field(error: dict) -> str:
    """Return the body field name for a request validation error."""
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    return location[0] if location else "body"


def _server_error_message(container: AppContainer, exc: Exception) -> str:
    """Return a user-facing server error message with local debug info."""
    fallback = "Server Error"
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
