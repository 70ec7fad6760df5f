"""
Password hashing and JWT helpers.

Passwords are hashed with passlib; tokens are HS256 (configurable) JWTs
issued with python-jose and carry the user id as ``sub``.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .errors import InvalidTokenError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(settings: Settings, subject: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    to_encode = {"sub": subject, "iat": now, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> str:
    """Return the token subject, raising InvalidTokenError if the token is bad or expired."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError("Invalid token") from e
    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Invalid token subject")
    return subject
