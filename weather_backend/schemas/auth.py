"""
Authentication schemas.

This module contains Pydantic schemas for signup and signin requests and responses.
"""

from pydantic import EmailStr, Field

from weather_backend.schemas.base import BaseSchema, MessageResponse, TimestampSchema


class SignupRequest(BaseSchema):
    """Schema for registering a new user."""
    username: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=1)


class SigninRequest(BaseSchema):
    """Schema for signing in."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class User(TimestampSchema):
    """Public view of a stored user."""
    id: int
    username: str
    email: EmailStr


class SigninResponse(MessageResponse):
    """Response schema for a successful signin."""
    token: str
