"""
Services Package

Business logic layer:
- user_service: user persistence, credential checks and token issuance
"""

__all__ = ["user_service"]
