"""
Authentication service.

Registers users with bcrypt-hashed passwords and exchanges valid
credentials for a signed, time-limited session token.
"""

from functools import lru_cache

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from weather_backend.config import Settings
from weather_backend.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    PersistenceError,
)
from weather_backend.crud.user import user as crud_user
from weather_backend.models.user import User
from weather_backend.schemas.auth import SigninRequest, SignupRequest
from weather_backend.utils.logging_config import get_logger
from weather_backend.utils.security import create_access_token, get_password_hash, verify_password

logger = get_logger(__name__)

SIGNUP_FAILED = "Error signing up"
SIGNIN_FAILED = "Error signing in"


@lru_cache
def _unknown_user_hash(rounds: int) -> str:
    # Checked against for unknown emails so every signin pays for one bcrypt verification
    return get_password_hash("unknown-user", rounds=rounds)


class AuthService:
    """Signup and signin against the user table."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def signup(self, db: AsyncSession, data: SignupRequest) -> User:
        """
        Register a new user.

        Raises:
            DuplicateEmailError: If the email is already registered
            PersistenceError: If the database lookup or insert fails
        """
        try:
            if await crud_user.get_by_email(db, email=data.email):
                logger.info("Signup rejected: email already registered")
                raise DuplicateEmailError()
            new_user = await crud_user.create(db, obj_in=data, rounds=self.settings.BCRYPT_ROUNDS)
        except IntegrityError as exc:
            # Lost a race with a concurrent signup for the same email
            await db.rollback()
            raise DuplicateEmailError() from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error(f"Signup failed: {exc}")
            raise PersistenceError(SIGNUP_FAILED, str(exc)) from exc

        logger.info(f"User {new_user.id} registered")
        return new_user

    async def signin(self, db: AsyncSession, data: SigninRequest) -> str:
        """
        Check credentials and issue a session token.

        Returns:
            JWT whose ``sub`` claim is the user's id

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
            PersistenceError: If the database lookup fails
        """
        try:
            user_obj = await crud_user.get_by_email(db, email=data.email)
        except SQLAlchemyError as exc:
            logger.error(f"Signin lookup failed: {exc}")
            raise PersistenceError(SIGNIN_FAILED, str(exc)) from exc

        if user_obj is not None:
            hashed_password = user_obj.hashed_password
        else:
            hashed_password = _unknown_user_hash(self.settings.BCRYPT_ROUNDS)
        password_ok = await run_in_threadpool(verify_password, data.password, hashed_password)

        if user_obj is None or not password_ok:
            logger.info("Signin rejected: invalid credentials")
            raise InvalidCredentialsError()

        token = create_access_token({"sub": str(user_obj.id)}, self.settings)
        logger.info(f"User {user_obj.id} signed in")
        return token
