"""
Models Package

Pydantic schemas for API requests and responses.
"""

__all__ = ["api_models"]
