"""
API Package

Contains FastAPI routers for:
- auth_api: /auth signup, signin, me and verify-token endpoints
- health_api: /health liveness endpoint
"""

__all__ = ["auth_api", "health_api"]
