"""
Conduit Backend — Comment Route Handlers
==========================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.dependencies import optional_auth, require_auth
from conduit.models.user import User
from conduit.schemas.comment import (
    MultipleCommentsResponse,
    NewCommentRequest,
    SingleCommentResponse,
)
from conduit.schemas.common import MessageResponse
from conduit.services.comment_service import comment_service

router = APIRouter(prefix="/articles/{slug}/comments", tags=["Comments"])


@router.get("", response_model=MultipleCommentsResponse, summary="List comments")
async def list_comments(
    slug: str,
    viewer: Optional[User] = Depends(optional_auth),
    db: AsyncSession = Depends(get_db_session),
) -> MultipleCommentsResponse:
    return await comment_service.list_comments(db, slug, viewer)


@router.post(
    "",
    response_model=SingleCommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment",
)
async def add_comment(
    slug: str,
    payload: NewCommentRequest,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleCommentResponse:
    return await comment_service.add_comment(db, user, slug, payload.comment)


@router.delete("/{comment_id}", response_model=MessageResponse, summary="Delete a comment")
async def delete_comment(
    slug: str,
    comment_id: int,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await comment_service.delete_comment(db, user, slug, comment_id)
