"""
Application configuration using Pydantic Settings.

This module defines the Settings object used across the service to configure:
- App metadata, environment and listen address
- MongoDB connectivity
- JWT signing parameters
- Logging level

Values are read from environment variables (and a .env file in development)
with defaults suitable for a local MongoDB. Settings are frozen once loaded.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    # App metadata
    APP_NAME: str = Field("jwt-auth-server")
    ENV: Literal["dev", "test", "staging", "prod"] = Field("dev")
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO")

    # Listener
    HOST: str = Field("0.0.0.0")
    PORT: int = Field(5001)
    PUBLIC_BASE_URL: str | None = Field(None, description="Externally reachable base URL, used in startup logs")

    # MongoDB connection string; the database name is taken from the URI path
    MONGODB_URI: str = Field("mongodb://localhost:27017/jwt-auth-db")
    MONGODB_DEFAULT_DATABASE: str = Field("test")

    # JWT
    JWT_SECRET_KEY: str = Field("supersecretkey_change_me")
    JWT_ALGORITHM: str = Field("HS256")
    JWT_EXPIRE_MINUTES: int = Field(60 * 24 * 7)

    @property
    def base_url(self) -> str:
        if self.PUBLIC_BASE_URL:
            return self.PUBLIC_BASE_URL.rstrip("/")
        return f"http://localhost:{self.PORT}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance.

    Tests that change the environment should call ``get_settings.cache_clear()``.
    """
    return Settings()  # type: ignore[call-arg]
