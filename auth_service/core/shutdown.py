"""
Graceful shutdown coordinator.

Tracks the server lifecycle (RUNNING -> SHUTTING_DOWN -> TERMINATED) and owns
the release of the database connection when the process is interrupted.
"""
from __future__ import annotations

import enum
import logging
import signal
from typing import Optional

from .mongo import MongoConnection

logger = logging.getLogger(__name__)


class ServerState(str, enum.Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class ShutdownCoordinator:
    def __init__(self, connection: MongoConnection):
        self.connection = connection
        self.state = ServerState.RUNNING
        self.exit_code: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.state is ServerState.RUNNING

    def begin_shutdown(self, signum: Optional[int] = None) -> None:
        if self.state is not ServerState.RUNNING:
            return
        self.state = ServerState.SHUTTING_DOWN
        signame = signal.Signals(signum).name if signum is not None else None
        logger.info("graceful_shutdown", extra={"signal": signame})

    def handle_signal(self, signum: int, frame) -> None:
        """SIGINT handler; only records the transition, the close happens in shutdown()."""
        self.begin_shutdown(signum)

    async def shutdown(self) -> int:
        """Close the database connection and return the process exit code."""
        if self.exit_code is not None:
            return self.exit_code
        self.begin_shutdown()
        try:
            await self.connection.close()
        except Exception:
            logger.exception("shutdown_error")
            self.exit_code = 1
        else:
            logger.info("mongo_connection_closed")
            self.exit_code = 0
        self.state = ServerState.TERMINATED
        return self.exit_code
