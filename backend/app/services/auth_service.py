"""
Wine Catalog Backend — Auth Service
=====================================

What:  User registration and password verification for session login.
How:   passlib's CryptContext hashes passwords with pbkdf2_sha256; the routes
       keep the authenticated user id in the signed session cookie.
"""

import logging
import uuid

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    WineCatalogError,
)
from app.models.user import User
from app.schemas.auth import RegisterResponse, UserResponse

logger = logging.getLogger(__name__)

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthService:
    """Register, authenticate and look up users."""

    async def _find_by_username(self, db: AsyncSession, username: str):
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, username: str, password: str) -> RegisterResponse:
        """
        Create a user with a hashed password.

        Raises: ConflictError when the username is taken.
        """
        try:
            if await self._find_by_username(db, username) is not None:
                raise ConflictError(
                    message="Username already exists",
                    context={"username": username},
                )
            user = User(id=uuid.uuid4(), username=username, password_hash=PWD_CTX.hash(password))
            db.add(user)
            await db.flush()
        except IntegrityError:
            raise ConflictError(message="Username already exists", context={"username": username})
        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to register user %s: %s", username, str(e), exc_info=True)
            raise DatabaseError(message="Failed to register user")

        logger.info("User registered: %s", username)
        return RegisterResponse(user_id=user.id)

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Verify credentials.

        Returns the User on success. Unknown user and wrong password both raise
        the same AuthenticationError, so the response does not reveal which
        usernames exist.
        """
        try:
            user = await self._find_by_username(db, username)
        except Exception as e:
            logger.error("Database error during login: %s", str(e))
            raise DatabaseError(message="Login failed. Please try again.")

        if user is None or not PWD_CTX.verify(password, user.password_hash):
            logger.info("Failed login for user: %s", username)
            raise AuthenticationError()

        logger.info("User logged in: %s", username)
        return user

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
        """The user behind a session, or AuthenticationError if it no longer exists."""
        try:
            user = await db.get(User, user_id)
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(message="Could not load the current user.")
        if user is None:
            raise AuthenticationError(message="Not logged in")
        return UserResponse.model_validate(user)


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
