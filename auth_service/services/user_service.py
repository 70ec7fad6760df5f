"""
User Service

Handles the users collection:
- Unique email index
- Account creation with hashed passwords
- Credential checks and token issuance
- Resolving bearer tokens back to stored users
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from ..core.config import Settings
from ..core.errors import InvalidCredentialsError, UserExistsError
from ..core.mongo import MongoConnection
from ..core.security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class UserService:
    """Service for user accounts stored in MongoDB."""

    def __init__(self, settings: Settings, connection: MongoConnection):
        self.settings = settings
        self.connection = connection
        self._users: Optional[AsyncIOMotorCollection] = None

    @property
    def users(self) -> AsyncIOMotorCollection:
        if self._users is None:
            self._users = self.connection.collection(USERS_COLLECTION)
        return self._users

    async def ensure_indexes(self) -> None:
        await self.users.create_index([("email", ASCENDING)], name="uniq_email", unique=True)

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def to_public(user: Dict[str, Any]) -> Dict[str, str]:
        return {"id": str(user["_id"]), "name": user["name"], "email": user["email"]}

    async def create_user(self, name: str, email: str, password: str) -> Dict[str, Any]:
        email = self.normalize_email(email)
        if await self.users.find_one({"email": email}) is not None:
            raise UserExistsError(email)

        user = {
            "name": name.strip(),
            "email": email,
            "password": hash_password(password),
            "created_at": datetime.now(timezone.utc),
        }
        try:
            result = await self.users.insert_one(user)
        except DuplicateKeyError as e:
            # Lost a race with a concurrent signup for the same email
            raise UserExistsError(email) from e
        user["_id"] = result.inserted_id
        logger.info("user_created", extra={"user_id": str(result.inserted_id)})
        return user

    async def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        user = await self.users.find_one({"email": self.normalize_email(email)})
        if user is None or not verify_password(password, user["password"]):
            raise InvalidCredentialsError("Invalid credentials")
        return user

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(user_id):
            return None
        return await self.users.find_one({"_id": ObjectId(user_id)})

    def issue_token(self, user: Dict[str, Any]) -> str:
        return create_access_token(self.settings, str(user["_id"]))

    def token_subject(self, token: str) -> str:
        """Return the user id a token was issued for; raises InvalidTokenError."""
        return decode_access_token(self.settings, token)
