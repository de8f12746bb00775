"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from move_inventory.api.inventory import router as inventory_router
from move_inventory.api.shared import router as shared_router
from move_inventory.app_logging import configure_logging
from move_inventory.containers import AppContainer
from move_inventory.errors import (
    AccessDeniedError,
    InvalidAccessLevelError,
    InvalidItemError,
    InvalidPhotoError,
    InvalidSafetyFactorError,
    InvalidShareTokenError,
    InventoryError,
    ItemNotFoundError,
    SessionNotFoundError,
)

_STATUS_BY_ERROR: dict[type[InventoryError], int] = {
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidPhotoError: status.HTTP_400_BAD_REQUEST,
    InvalidSafetyFactorError: status.HTTP_400_BAD_REQUEST,
    InvalidItemError: status.HTTP_400_BAD_REQUEST,
    InvalidAccessLevelError: status.HTTP_400_BAD_REQUEST,
    InvalidShareTokenError: status.HTTP_403_FORBIDDEN,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
}


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

    app.include_router(inventory_router)
    app.include_router(shared_router)

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(
        request: Request, exc: InventoryError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.exception("Unhandled inventory error", exc_info=exc)
        else:
            logger.warning(
                "Request rejected",
                extra={"path": request.url.path, "error": type(exc).__name__},
            )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: InventoryError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
