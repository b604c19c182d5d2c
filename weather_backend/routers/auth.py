"""
Authentication router.

This module contains the signup and signin endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from weather_backend.config import get_settings
from weather_backend.database import get_db
from weather_backend.dependencies.auth import get_auth_service
from weather_backend.schemas.auth import SigninRequest, SigninResponse, SignupRequest
from weather_backend.schemas.base import MessageResponse
from weather_backend.services.auth import AuthService

router = APIRouter(
    tags=["authentication"],
    responses={
        400: {"model": MessageResponse, "description": "Invalid request or email already exists"},
        500: {"description": "Database error"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=get_settings().RATE_LIMIT_ENABLED)


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("3/minute")
async def signup(
    request: Request,
    user_in: SignupRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user.

    The password is stored as a bcrypt hash. No token is issued here;
    call `/signin` afterwards.

    Rate limit: 3 requests per minute
    """
    await auth_service.signup(db, user_in)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/signin",
    response_model=SigninResponse,
    responses={401: {"model": MessageResponse, "description": "Invalid email or password"}},
)
@limiter.limit("5/minute")  # Strict limit to prevent brute force attacks
async def signin(
    request: Request,
    credentials: SigninRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate a user and return a session token.

    The token is a JWT carrying the user id and expires after one hour.
    Unknown emails and wrong passwords get the same 401 response.

    Rate limit: 5 requests per minute (to prevent brute force attacks)
    """
    token = await auth_service.signin(db, credentials)
    return SigninResponse(message="Login successful", token=token)
