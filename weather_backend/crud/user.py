"""
User CRUD operations.

This module contains CRUD operations specific to user management.
"""

from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_backend.crud.base import CRUDBase
from weather_backend.models.user import User
from weather_backend.schemas.auth import SignupRequest
from weather_backend.utils.security import get_password_hash


class CRUDUser(CRUDBase[User, SignupRequest]):
    """
    CRUD operations for User model.
    """

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: SignupRequest,
        rounds: int = 10,
    ) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            obj_in: Signup data
            rounds: bcrypt cost factor

        Returns:
            Created user instance
        """
        db_obj = User(
            username=obj_in.username,
            email=obj_in.email,
            hashed_password=await run_in_threadpool(get_password_hash, obj_in.password, rounds=rounds),
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def count_by_email(self, db: AsyncSession, *, email: str) -> int:
        """Number of users registered under ``email``."""
        result = await db.execute(
            select(func.count()).select_from(User).where(User.email == email)
        )
        return result.scalar_one()


# Create instance of CRUDUser
user = CRUDUser(User)
