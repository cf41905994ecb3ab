"""
Conduit Backend — User Service
================================

What:  Registration, login, and the authenticated user's own account.
How:   Uniqueness is checked in code before writing (email first, then
       username) so clients get a field-level message; the unique indexes
       on `users` remain the hard guard under concurrency.
Who:   User routes.

Every successful call returns the user payload with a freshly issued token.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.exceptions import UnauthorizedError, ValidationError
from conduit.models.user import User
from conduit.schemas.user import (
    AuthenticatedUser,
    LoginUser,
    RegisterUser,
    UpdateUser,
    UserResponse,
)
from conduit.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)

TAKEN = "has already been taken"
INVALID_CREDENTIALS = "Email or password is invalid"


class UserService:
    """
    Business logic for accounts.

    Error Handling:
        - Duplicate email/username → ValidationError (422, field-keyed)
        - Bad credentials → UnauthorizedError (401); unknown email and wrong
          password produce identical responses
    """

    async def get_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    def to_response(self, user: User) -> UserResponse:
        """Wraps the user with a new token. The password hash is never included."""
        return UserResponse(
            user=AuthenticatedUser(
                email=user.email,
                token=issue_token(user),
                username=user.username,
                bio=user.bio or "",
                image=user.image or "",
            )
        )

    async def register(self, db: AsyncSession, data: RegisterUser) -> UserResponse:
        """
        Creates an account.

        Raises:
            ValidationError: {"email": [...]} or {"username": [...]} when taken.
        """
        if await self.get_by_email(db, data.email) is not None:
            raise ValidationError.for_field("email", TAKEN)
        if await self.get_by_username(db, data.username) is not None:
            raise ValidationError.for_field("username", TAKEN)

        user = User(
            username=data.username,
            email=data.email,
            password=hash_password(data.password),
        )
        db.add(user)
        await db.flush()
        logger.info("User registered: %s (id=%s)", user.username, user.id)
        return self.to_response(user)

    async def login(self, db: AsyncSession, data: LoginUser) -> UserResponse:
        user = await self.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return self.to_response(user)

    async def update_user(
        self, db: AsyncSession, user: User, data: UpdateUser
    ) -> UserResponse:
        """
        Applies a partial update to the caller's account.

        - email / username: uniqueness re-checked only when the value changes
        - password: re-hashed
        - bio / image: assigned whenever present in the payload, so an
          explicit null or "" clears them
        """
        fields = data.model_fields_set

        if data.email is not None and data.email != user.email:
            if await self.get_by_email(db, data.email) is not None:
                raise ValidationError.for_field("email", TAKEN)
            user.email = data.email

        if data.username is not None and data.username != user.username:
            if await self.get_by_username(db, data.username) is not None:
                raise ValidationError.for_field("username", TAKEN)
            user.username = data.username

        if data.password is not None:
            user.password = hash_password(data.password)

        if "bio" in fields:
            user.bio = data.bio
        if "image" in fields:
            user.image = data.image

        await db.flush()
        logger.info("User updated: %s (id=%s)", user.username, user.id)
        return self.to_response(user)


# Module-level singleton
user_service = UserService()
