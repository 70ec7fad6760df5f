"""
Core Infrastructure Package

Contains shared infrastructure components:
- config: Application configuration and settings
- logging: Structured JSON logging utilities
- mongo: MongoDB connection handle and connection-state events
- middleware: CORS and request/error middleware
- security: Password hashing and JWT helpers
- shutdown: Graceful shutdown coordinator
"""

__all__ = ["config", "errors", "logging", "middleware", "mongo", "security", "shutdown"]
