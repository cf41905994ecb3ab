"""
Conduit Backend — Article Route Handlers
==========================================

What:  Article listing, feed, CRUD and favorites.
How:   /articles/feed is declared before /articles/{slug} so "feed" is never
       taken for a slug.

Pagination:
    limit  >= 1,  default 20
    offset >= 0,  default 0
    Out-of-range values are rejected with 422 keyed by parameter name.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.dependencies import optional_auth, require_auth
from conduit.models.user import User
from conduit.schemas.article import (
    MultipleArticlesResponse,
    NewArticleRequest,
    SingleArticleResponse,
    UpdateArticleRequest,
)
from conduit.schemas.common import MessageResponse
from conduit.services.article_service import article_service

router = APIRouter(prefix="/articles", tags=["Articles"])


@router.get(
    "",
    response_model=MultipleArticlesResponse,
    summary="List articles, newest first",
)
async def list_articles(
    tag: Optional[str] = Query(default=None, description="Filter by tag name"),
    author: Optional[str] = Query(default=None, description="Filter by author username"),
    favorited: Optional[str] = Query(
        default=None, description="Filter by username of a user who favorited"
    ),
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    viewer: Optional[User] = Depends(optional_auth),
    db: AsyncSession = Depends(get_db_session),
) -> MultipleArticlesResponse:
    return await article_service.list_articles(
        db,
        viewer=viewer,
        tag=tag,
        author=author,
        favorited=favorited,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/feed",
    response_model=MultipleArticlesResponse,
    summary="Articles by followed authors",
)
async def get_feed(
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> MultipleArticlesResponse:
    return await article_service.get_feed(db, user, limit=limit, offset=offset)


@router.post(
    "",
    response_model=SingleArticleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an article",
)
async def create_article(
    payload: NewArticleRequest,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleArticleResponse:
    return await article_service.create_article(db, user, payload.article)


@router.get("/{slug}", response_model=SingleArticleResponse, summary="Get an article")
async def get_article(
    slug: str,
    viewer: Optional[User] = Depends(optional_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleArticleResponse:
    return await article_service.get_article(db, slug, viewer)


@router.put(
    "/{slug}", response_model=SingleArticleResponse, summary="Update an article"
)
async def update_article(
    slug: str,
    payload: UpdateArticleRequest,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleArticleResponse:
    return await article_service.update_article(db, user, slug, payload.article)


@router.delete("/{slug}", response_model=MessageResponse, summary="Delete an article")
async def delete_article(
    slug: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await article_service.delete_article(db, user, slug)


@router.post(
    "/{slug}/favorite",
    response_model=SingleArticleResponse,
    summary="Favorite an article",
)
async def favorite_article(
    slug: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleArticleResponse:
    return await article_service.favorite_article(db, user, slug)


@router.delete(
    "/{slug}/favorite",
    response_model=SingleArticleResponse,
    summary="Unfavorite an article",
)
async def unfavorite_article(
    slug: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> SingleArticleResponse:
    return await article_service.unfavorite_article(db, user, slug)
