"""FastAPI application exposing the editor bridge."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..config import BridgeConfig
from ..errors import BridgeError, PersistenceError
from ..logging import get_logger
from .models import ErrorResponse
from .routes import create_editor_router
from .services import BridgeServices

LOGGER = get_logger(__name__)


def create_app(config: BridgeConfig | None = None, *, services: BridgeServices | None = None) -> FastAPI:
    """Create the bridge application.

    Args:
        config: Bridge configuration; defaults are used when omitted.
        services: Prebuilt registry and tool wrappers, mainly for tests.

    Returns:
        Configured FastAPI application with the editor endpoints.
    """
    if services is None:
        services = BridgeServices.from_config(config or BridgeConfig())
    app = FastAPI(title="editorbridge", description="Completion and code navigation for the web editor.")
    app.state.services = services

    @app.exception_handler(RequestValidationError)
    async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.error("Invalid request body for %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="invalid_request", detail=jsonable_encoder(exc.errors())).model_dump(),
        )

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="persistence_failed", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
        LOGGER.error("Request to %s failed: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
        )

    app.include_router(create_editor_router(services))
    return app


__all__ = ["create_app"]
