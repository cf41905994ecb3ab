"""
Conduit Backend — User Route Handlers
=======================================

What:  Registration, login, and the authenticated user's own account.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.dependencies import require_auth
from conduit.models.user import User
from conduit.schemas.user import (
    LoginRequest,
    RegisterRequest,
    UpdateUserRequest,
    UserResponse,
)
from conduit.services.user_service import user_service

router = APIRouter(tags=["Users"])


@router.post(
    "/users/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user (alias)",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """
    Creates an account and returns it with a token.

    422 when the email or username is already taken, or a field rule fails.
    """
    return await user_service.register(db, payload.user)


@router.post(
    "/users/login",
    response_model=UserResponse,
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.login(db, payload.user)


@router.get(
    "/user",
    response_model=UserResponse,
    summary="Get the current user",
)
async def get_current_user(user: User = Depends(require_auth)) -> UserResponse:
    return user_service.to_response(user)


@router.put(
    "/user",
    response_model=UserResponse,
    summary="Update the current user",
)
async def update_current_user(
    payload: UpdateUserRequest,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_user(db, user, payload.user)
