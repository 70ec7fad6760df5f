"""
FastAPI application factory.

Builds the HTTP application around an explicitly constructed ServerContext:
- CORS middleware (outermost) and request/error middleware
- JSON error rendering for HTTP and validation errors
- /api/health and /api/auth routers
- Catch-all 404 for anything else
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.auth_api import router as auth_router
from .api.health_api import router as health_router
from .core.config import Settings
from .core.middleware import (
    cors_middleware,
    http_exception_handler,
    request_context_middleware,
    validation_exception_handler,
)
from .core.mongo import MongoConnection
from .core.shutdown import ShutdownCoordinator
from .services.user_service import UserService

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
NOT_FOUND_BODY = {"error": "Route not found"}


@dataclass
class ServerContext:
    """Process-wide state, created once at startup and handed to the app."""

    settings: Settings
    connection: MongoConnection
    coordinator: ShutdownCoordinator

    @classmethod
    def create(cls, settings: Settings) -> "ServerContext":
        connection = MongoConnection(settings)
        return cls(settings=settings, connection=connection, coordinator=ShutdownCoordinator(connection))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup/shutdown and make sure the users index exists."""
    settings: Settings = app.state.settings
    logger.info("service_startup", extra={"app_name": settings.APP_NAME, "env": settings.ENV})
    try:
        await app.state.user_service.ensure_indexes()
    except PyMongoError as e:
        logger.error("index_setup_failed", extra={"error": str(e)})

    yield

    logger.info("service_shutdown")


def create_app(context: ServerContext) -> FastAPI:
    app = FastAPI(
        title="JWT Auth Server",
        description="Signup, signin and token verification backed by MongoDB",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.context = context
    app.state.settings = context.settings
    app.state.user_service = UserService(context.settings, context.connection)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # The last middleware added wraps the others, so CORS sees every response
    app.middleware("http")(request_context_middleware)
    app.middleware("http")(cors_middleware)

    app.include_router(health_router, prefix=API_PREFIX, tags=["health"])
    app.include_router(auth_router, prefix=API_PREFIX, tags=["auth"])

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def route_not_found(path: str) -> JSONResponse:
        return JSONResponse(status_code=404, content=NOT_FOUND_BODY)

    return app
