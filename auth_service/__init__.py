"""
JWT Auth Server Package

This package contains the components of the JWT auth HTTP service:
- core: Configuration, logging, MongoDB connection, middleware and shutdown
- services: User persistence and credential checks
- models: Pydantic request/response schemas
- api: FastAPI routers for auth and health endpoints
"""

__version__ = "1.0.0"
__all__ = ["core", "services", "models", "api"]
