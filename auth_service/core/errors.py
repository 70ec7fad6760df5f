"""Exception types raised by the service."""
from __future__ import annotations

from typing import Optional


class AuthServiceError(Exception):
    """Base class for errors raised by this package."""


class DatabaseConnectionError(AuthServiceError):
    """The initial MongoDB connection could not be established."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class UserExistsError(AuthServiceError):
    pass


class InvalidCredentialsError(AuthServiceError):
    pass


class InvalidTokenError(AuthServiceError):
    pass
