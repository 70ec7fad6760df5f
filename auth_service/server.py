"""
Server lifecycle orchestration.

serve() runs the startup sequence in a fixed order:
1. connect to MongoDB (a failure ends startup with exit code 1, before any socket is bound)
2. register connection-state observers
3. install the shutdown coordinator as the SIGINT handler
4. listen with uvicorn and log the endpoint map once sockets are bound
5. close the connection when the server stops and report the exit code
"""
from __future__ import annotations

import asyncio
import logging
import signal
import socket
import sys
from typing import List, Optional, Tuple

import uvicorn
from fastapi import FastAPI

from .app import API_PREFIX, ServerContext, create_app
from .core.config import Settings, get_settings
from .core.errors import DatabaseConnectionError
from .core.logging import configure_logging
from .core.mongo import MongoConnection

logger = logging.getLogger(__name__)


def describe_endpoints(app: FastAPI) -> List[Tuple[str, str]]:
    """Return (method, path) pairs for every documented API route, in registration order."""
    endpoints: List[Tuple[str, str]] = []
    for path, operations in app.openapi()["paths"].items():
        if not path.startswith(API_PREFIX):
            continue
        for method in sorted(m.upper() for m in operations):
            if method != "HEAD":
                endpoints.append((method, path))
    return endpoints


def log_endpoints(app: FastAPI, base_url: str) -> None:
    logger.info("server_running", extra={"base_url": base_url, "health_check": f"{base_url}{API_PREFIX}/health"})
    for method, path in describe_endpoints(app):
        logger.info("endpoint_mounted", extra={"method": method, "url": f"{base_url}{path}"})


def register_connection_observers(connection: MongoConnection) -> None:
    def on_connected() -> None:
        logger.info("mongo_event_connected")

    def on_error(error: Exception) -> None:
        logger.error("mongo_event_error", extra={"error": str(error)})

    def on_disconnected() -> None:
        logger.warning("mongo_event_disconnected")

    connection.events.on("connected", on_connected)
    connection.events.on("error", on_error)
    connection.events.on("disconnected", on_disconnected)


class AppServer(uvicorn.Server):
    """uvicorn server that reports SIGINT to the shutdown coordinator."""

    def __init__(self, config: uvicorn.Config, context: ServerContext, app: FastAPI):
        super().__init__(config)
        self.context = context
        self.fastapi_app = app

    def handle_exit(self, sig: int, frame) -> None:
        if sig == signal.SIGINT:
            self.context.coordinator.begin_shutdown(sig)
        super().handle_exit(sig, frame)

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if not self.should_exit:
            log_endpoints(self.fastapi_app, self.context.settings.base_url)


async def serve(settings: Settings) -> int:
    """Run the service until interrupted and return the process exit code."""
    context = ServerContext.create(settings)
    try:
        await context.connection.connect()
    except DatabaseConnectionError as e:
        logger.critical("startup_aborted", extra={"error": str(e), "hint": e.hint})
        return 1

    register_connection_observers(context.connection)
    previous_handler = signal.signal(signal.SIGINT, context.coordinator.handle_signal)
    try:
        if context.coordinator.is_running:
            app = create_app(context)
            config = uvicorn.Config(
                app,
                host=settings.HOST,
                port=settings.PORT,
                log_config=None,
                access_log=False,
            )
            await AppServer(config, context, app).serve()
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        exit_code = await context.coordinator.shutdown()
    return exit_code


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(serve(settings)))
