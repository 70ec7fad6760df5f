"""
Auth API

FastAPI router for account endpoints:
- POST /auth/signup: Create an account and return a token
- POST /auth/signin: Check credentials and return a token
- GET /auth/me: Return the user behind a bearer token
- POST /auth/verify-token: Report whether a bearer token is valid
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.errors import InvalidCredentialsError, InvalidTokenError, UserExistsError
from ..models.api_models import (
    AuthResponse,
    ErrorResponse,
    MeResponse,
    SigninRequest,
    SignupRequest,
    UserOut,
    VerifyTokenResponse,
)
from ..services.user_service import UserService

router = APIRouter(
    prefix="/auth",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_user_service(request: Request) -> UserService:
    """Dependency to get the user service from app state."""
    return request.app.state.user_service


async def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided", headers=_BEARER_CHALLENGE)
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    try:
        user_id = users.token_subject(token)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token", headers=_BEARER_CHALLENGE)
    user = await users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, users: UserService = Depends(get_user_service)) -> AuthResponse:
    try:
        user = await users.create_user(body.name, body.email, body.password)
    except UserExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    return AuthResponse(
        message="User created successfully",
        token=users.issue_token(user),
        user=UserOut(**users.to_public(user)),
    )


@router.post("/signin", response_model=AuthResponse)
async def signin(body: SigninRequest, users: UserService = Depends(get_user_service)) -> AuthResponse:
    try:
        user = await users.authenticate(body.email, body.password)
    except InvalidCredentialsError:
        logger.info("signin_rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return AuthResponse(
        message="Signed in successfully",
        token=users.issue_token(user),
        user=UserOut(**users.to_public(user)),
    )


@router.get("/me", response_model=MeResponse)
async def me(user: Dict[str, Any] = Depends(get_current_user), users: UserService = Depends(get_user_service)) -> MeResponse:
    return MeResponse(user=UserOut(**users.to_public(user)))


@router.post("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(
    token: str = Depends(get_bearer_token),
    users: UserService = Depends(get_user_service),
) -> VerifyTokenResponse:
    try:
        user = await users.get_user(users.token_subject(token))
    except InvalidTokenError:
        user = None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token", headers=_BEARER_CHALLENGE)
    return VerifyTokenResponse(valid=True, user=UserOut(**users.to_public(user)))
