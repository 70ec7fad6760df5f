from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from auth_service.app import ServerContext, create_app
from auth_service.core.config import Settings
from auth_service.core.mongo import MongoConnection
from auth_service.core.shutdown import ShutdownCoordinator


class FakeCollection:
    """Just enough of an AsyncIOMotorCollection for the user service."""

    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []
        self.create_index = AsyncMock(return_value="uniq_email")

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for doc in self.docs:
            if all(doc.get(key) == value for key, value in query.items()):
                return dict(doc)
        return None

    async def insert_one(self, doc: Dict[str, Any]) -> SimpleNamespace:
        inserted_id = ObjectId()
        self.docs.append({**doc, "_id": inserted_id})
        return SimpleNamespace(inserted_id=inserted_id)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        ENV="test",
        PORT=5001,
        MONGODB_URI="mongodb://localhost:27017/jwt-auth-db",
        JWT_SECRET_KEY="test-secret",
    )


@pytest.fixture
def users_collection():
    return FakeCollection()


@pytest.fixture
def connection(users_collection):
    conn = MagicMock(spec=MongoConnection)
    conn.collection.return_value = users_collection
    conn.close = AsyncMock()
    return conn


@pytest.fixture
def app(settings, connection):
    context = ServerContext(settings=settings, connection=connection, coordinator=ShutdownCoordinator(connection))
    return create_app(context)


@pytest.fixture
def client(app):
    return TestClient(app)
