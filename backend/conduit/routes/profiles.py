"""
Conduit Backend — Profile Route Handlers
==========================================
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.dependencies import optional_auth, require_auth
from conduit.models.user import User
from conduit.schemas.profile import ProfileResponse
from conduit.services.profile_service import profile_service

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/{username}", response_model=ProfileResponse, summary="Get a profile")
async def get_profile(
    username: str,
    viewer: Optional[User] = Depends(optional_auth),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.get_profile(db, username, viewer)


@router.post(
    "/{username}/follow", response_model=ProfileResponse, summary="Follow a user"
)
async def follow_user(
    username: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.follow_user(db, user, username)


@router.delete(
    "/{username}/follow", response_model=ProfileResponse, summary="Unfollow a user"
)
async def unfollow_user(
    username: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.unfollow_user(db, user, username)
