"""
MongoDB connection handle and connection-state events.

Provides a single pooled AsyncIOMotorClient per MongoConnection, created and
verified with a ping on startup, plus a small event emitter fed by pymongo
monitoring listeners so the server can log connected/error/disconnected
transitions.
"""
from __future__ import annotations

import logging
import re
import threading
from typing import Any, Callable, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import monitoring
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import DatabaseConnectionError

logger = logging.getLogger(__name__)

CLIENT_OPTIONS: Dict[str, Any] = {
    "w": "majority",
    "retryWrites": True,
    "maxPoolSize": 10,
    "serverSelectionTimeoutMS": 10_000,
    "socketTimeoutMS": 45_000,
}

AUTH_HINT = "Please check your MongoDB credentials"
NETWORK_HINT = "Please check your network connection and the cluster IP allow-list"
TIMEOUT_HINT = "Connection timeout - please check the cluster status"

_CREDENTIALS_RE = re.compile(r"//[^@/]+@")


def classify_connection_error(message: str) -> Optional[str]:
    """Map a driver error message to an operator hint, or None if unrecognised."""
    text = message.lower()
    if "authentication failed" in text:
        return AUTH_HINT
    if "network" in text:
        return NETWORK_HINT
    if "timeout" in text or "timed out" in text:
        return TIMEOUT_HINT
    return None


def redact_uri(uri: str) -> str:
    return _CREDENTIALS_RE.sub("//***@", uri)


class ConnectionEvents(monitoring.TopologyListener, monitoring.ServerHeartbeatListener):
    """Emit ``connected``, ``error`` and ``disconnected`` from driver monitoring.

    Callbacks run on the driver's monitor threads and must not block.
    """

    EVENTS = ("connected", "error", "disconnected")

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[..., None]]] = {name: [] for name in self.EVENTS}
        self._lock = threading.Lock()
        self._connected = False

    def on(self, event: str, handler: Callable[..., None]) -> None:
        if event not in self._handlers:
            raise ValueError(f"Unknown connection event: {event}")
        self._handlers[event].append(handler)

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self._handlers[event]):
            handler(*args)

    def _set_connected(self, connected: bool) -> None:
        with self._lock:
            changed = connected != self._connected
            self._connected = connected
        if changed:
            self.emit("connected" if connected else "disconnected")

    # TopologyListener
    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        pass

    def description_changed(self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        self._set_connected(event.new_description.has_writable_server())

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        self._set_connected(False)

    # ServerHeartbeatListener
    def started(self, event: monitoring.ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: monitoring.ServerHeartbeatSucceededEvent) -> None:
        pass

    def failed(self, event: monitoring.ServerHeartbeatFailedEvent) -> None:
        self.emit("error", event.reply)


class MongoConnection:
    """The process-wide database connection handle.

    At most one client is active per instance; ``connect`` on a connected
    handle is a no-op. ``close`` releases the client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.events = ConnectionEvents()
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError("Mongo client not initialized. Call connect() on startup.")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError("Mongo client not initialized. Call connect() on startup.")
        return self._db

    @property
    def name(self) -> str:
        return self.database.name

    @property
    def host(self) -> str:
        return ",".join(f"{host}:{port}" for host, port in sorted(self.client.nodes))

    def collection(self, name: str) -> AsyncIOMotorCollection:
        return self.database[name]

    async def connect(self) -> None:
        """Open the client and verify it with a ping.

        Raises DatabaseConnectionError with a diagnostic hint on failure.
        """
        if self._client is not None:
            return
        uri = self.settings.MONGODB_URI
        logger.info("mongo_connect", extra={"uri": redact_uri(uri)})

        client: Optional[AsyncIOMotorClient] = None
        try:
            client = AsyncIOMotorClient(
                uri,
                appname=self.settings.APP_NAME,
                event_listeners=[self.events],
                **CLIENT_OPTIONS,
            )
            await client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            message = str(e)
            hint = classify_connection_error(message)
            logger.error("mongo_connection_error", extra={"error": message, "hint": hint})
            raise DatabaseConnectionError(message, hint=hint) from e

        self._client = client
        self._db = client.get_default_database(self.settings.MONGODB_DEFAULT_DATABASE)
        logger.info("mongo_connected", extra={"database": self.name, "host": self.host})

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            self._client = None
            self._db = None
