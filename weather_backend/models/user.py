"""
User database model.

This module contains the User model backing signup and signin.
"""

from sqlalchemy import Column, String

from weather_backend.models.base import BaseModel


class User(BaseModel):
    """
    Registered user.

    Email is the login key and must be unique; only the bcrypt hash of
    the password is stored.
    """

    __tablename__ = "users"

    username = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
