"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

from castpro_console.api.console import router as console_router
from castpro_console.app_logging import configure_logging
from castpro_console.containers import AppContainer
from castpro_console.domain.notices import Notice
from castpro_console.errors import (
    ApiError,
    AuthError,
    ConfirmationNotFoundError,
    ConsoleError,
    NavigationInterrupted,
    NetworkError,
    NotFoundError,
    OperationInProgressError,
    SessionExpiredError,
    TransitionUnavailableError,
    ValidationError,
)
from castpro_console.services.navigation import LOGIN_PATH

_CLIENT_ERROR = 400

_STATUS_BY_ERROR: list[tuple[type[ConsoleError], int]] = [
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConfirmationNotFoundError, status.HTTP_404_NOT_FOUND),
    (OperationInProgressError, status.HTTP_409_CONFLICT),
    (TransitionUnavailableError, status.HTTP_409_CONFLICT),
    (NetworkError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


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

    app.include_router(console_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(NavigationInterrupted)
    async def redirect_evicted_view(
        request: Request, exc: NavigationInterrupted
    ) -> RedirectResponse:
        return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(SessionExpiredError)
    async def redirect_expired_session(
        request: Request, exc: SessionExpiredError
    ) -> RedirectResponse:
        logger.info("Session expired during %s", request.url.path)
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(ConsoleError)
    async def surface_console_error(
        request: Request, exc: ConsoleError
    ) -> JSONResponse:
        logger.warning(
            "%s on %s: %s", type(exc).__name__, request.url.path, exc.message
        )
        body: dict[str, object] = {"notice": Notice.error("Error", exc.message)}
        if isinstance(exc, ValidationError) and exc.field_errors:
            body["field_errors"] = exc.field_errors
        return JSONResponse(
            jsonable_encoder(body), status_code=http_status_for(exc)
        )

    return app


def http_status_for(exc: ConsoleError) -> int:
    """Map a console error to the status code returned to the presentation."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    if isinstance(exc, ApiError) and (exc.status_code or 0) >= _CLIENT_ERROR:
        return exc.status_code
    return status.HTTP_502_BAD_GATEWAY
