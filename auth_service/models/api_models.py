"""
API Models

Pydantic models for API requests and responses:
- SignupRequest/SigninRequest: credentials posted to the auth endpoints
- UserOut: public view of a stored user
- AuthResponse/MeResponse/VerifyTokenResponse: auth endpoint payloads
- HealthResponse: health check payload
- ErrorResponse: error body shared by 4xx/5xx responses
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Request model for account creation."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plain-text password, hashed before storage")


class SigninRequest(BaseModel):
    """Request model for signing in."""

    email: str
    password: str


class UserOut(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    """Response model for signup and signin."""

    message: str
    token: str = Field(..., description="Bearer JWT")
    user: UserOut


class MeResponse(BaseModel):
    user: UserOut


class VerifyTokenResponse(BaseModel):
    valid: bool
    user: UserOut


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    message: str = Field(..., description="Liveness message")
    port: int = Field(..., description="Configured listen port")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the check")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Human-readable error message")
    details: Optional[List[Any]] = Field(None, description="Validation details, when present")
