"""
Conduit Backend — Article Service
===================================

What:  Articles: listing with filters, the personal feed, CRUD, favorites.
How:   Queries use explicit eager loads (selectinload) for author and tags;
       per-caller flags (favorited, author.following) and favorite counts are
       fetched in batch queries for the whole page, never per article.
Who:   Article routes.

Listing Query (GET /api/articles):
    SELECT articles WHERE <tag?> AND <author?> AND <favorited?>
    ORDER BY created_at DESC, id DESC
    LIMIT :limit OFFSET :offset

    articlesCount is a COUNT over the same filtered query without
    LIMIT/OFFSET, so it covers the full result set.

Slug Generation:
    slugify(title) + "-" + last six digits of the millisecond clock,
    e.g. "How to train your dragon" → "how-to-train-your-dragon-482913".
    Titles that slugify to nothing use "article". If the slug is already
    taken a random hex suffix is added. Slugs never change after creation.
"""

import logging
import secrets
import time
from typing import Dict, List, Optional, Sequence, Set

from slugify import slugify
from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conduit.exceptions import ForbiddenError, NotFoundError
from conduit.models.article import Article
from conduit.models.comment import Comment
from conduit.models.favorite import Favorite
from conduit.models.follow import Follow
from conduit.models.tag import Tag, article_tags
from conduit.models.user import User
from conduit.schemas.article import (
    ArticleOut,
    MultipleArticlesResponse,
    NewArticle,
    SingleArticleResponse,
    UpdateArticle,
)
from conduit.schemas.common import MessageResponse
from conduit.schemas.profile import Profile
from conduit.services.profile_service import profile_service
from conduit.services.tag_service import normalize_tag, tag_service

logger = logging.getLogger(__name__)

# Leaves room for the "-NNNNNN" clock suffix and a collision suffix
SLUG_BASE_MAX_LENGTH = 240


def make_slug(title: str) -> str:
    base = slugify(title or "", max_length=SLUG_BASE_MAX_LENGTH) or "article"
    suffix = str(int(time.time() * 1000))[-6:]
    return f"{base}-{suffix}"


class ArticleService:
    """
    Business logic for articles and favorites.

    Ownership:
        Only the author may update or delete an article; everyone else gets
        ForbiddenError (403). Missing slugs raise NotFoundError (404) first.
    """

    # ── Query Helpers ─────────────────────────────────────────────────────
    def _with_relations(self, query: Select) -> Select:
        return query.options(selectinload(Article.author), selectinload(Article.tags))

    async def _get_by_slug(self, db: AsyncSession, slug: str) -> Article:
        result = await db.execute(
            self._with_relations(select(Article).where(Article.slug == slug))
        )
        article = result.scalar_one_or_none()
        if article is None:
            raise NotFoundError("Article", resource_id=slug)
        return article

    async def _slug_taken(self, db: AsyncSession, slug: str) -> bool:
        result = await db.execute(select(Article.id).where(Article.slug == slug))
        return result.first() is not None

    async def _unique_slug(self, db: AsyncSession, title: str) -> str:
        base = make_slug(title)
        slug = base
        while await self._slug_taken(db, slug):
            slug = f"{base}-{secrets.token_hex(3)}"
        return slug

    async def _favorites_counts(
        self, db: AsyncSession, article_ids: Sequence[int]
    ) -> Dict[int, int]:
        if not article_ids:
            return {}
        result = await db.execute(
            select(Favorite.article_id, func.count())
            .where(Favorite.article_id.in_(article_ids))
            .group_by(Favorite.article_id)
        )
        return {article_id: count for article_id, count in result.all()}

    async def _favorited_ids(
        self, db: AsyncSession, viewer: Optional[User], article_ids: Sequence[int]
    ) -> Set[int]:
        if viewer is None or not article_ids:
            return set()
        result = await db.execute(
            select(Favorite.article_id).where(
                Favorite.user_id == viewer.id,
                Favorite.article_id.in_(article_ids),
            )
        )
        return set(result.scalars().all())

    async def _annotate(
        self,
        db: AsyncSession,
        articles: Sequence[Article],
        viewer: Optional[User],
    ) -> List[ArticleOut]:
        """
        Builds response items with per-caller flags.

        Three batch queries per page regardless of its size: favorite
        counts, the caller's favorites, the caller's follows.
        """
        ids = [article.id for article in articles]
        counts = await self._favorites_counts(db, ids)
        favorited = await self._favorited_ids(db, viewer, ids)
        following = await profile_service.following_ids(
            db,
            viewer.id if viewer else None,
            (article.author_id for article in articles),
        )
        return [
            ArticleOut(
                slug=article.slug,
                title=article.title,
                description=article.description,
                body=article.body,
                tag_list=[tag.name for tag in article.tags],
                created_at=article.created_at,
                updated_at=article.updated_at,
                favorited=article.id in favorited,
                favorites_count=counts.get(article.id, 0),
                author=Profile.from_user(
                    article.author, following=article.author_id in following
                ),
            )
            for article in articles
        ]

    async def _single(
        self, db: AsyncSession, article: Article, viewer: Optional[User]
    ) -> SingleArticleResponse:
        items = await self._annotate(db, [article], viewer)
        return SingleArticleResponse(article=items[0])

    async def _page(
        self,
        db: AsyncSession,
        query: Select,
        viewer: Optional[User],
        limit: int,
        offset: int,
    ) -> MultipleArticlesResponse:
        total = await db.scalar(select(func.count()).select_from(query.subquery()))
        result = await db.execute(
            self._with_relations(query)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .limit(limit)
            .offset(offset)
        )
        articles = result.scalars().all()
        return MultipleArticlesResponse(
            articles=await self._annotate(db, articles, viewer),
            articles_count=total or 0,
        )

    # ── Reads ─────────────────────────────────────────────────────────────
    async def list_articles(
        self,
        db: AsyncSession,
        viewer: Optional[User] = None,
        tag: Optional[str] = None,
        author: Optional[str] = None,
        favorited: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> MultipleArticlesResponse:
        """
        Lists articles, newest first. Filters are AND-composed.

        Args:
            tag:       only articles carrying this tag (normalized like stored names)
            author:    only articles written by this username
            favorited: only articles favorited by this username
        """
        query = select(Article)

        tag_name = normalize_tag(tag)
        if tag_name:
            query = query.where(Article.tags.any(Tag.name == tag_name))
        if author:
            query = query.where(Article.author.has(User.username == author))
        if favorited:
            favorited_by = (
                select(Favorite.article_id)
                .join(User, User.id == Favorite.user_id)
                .where(User.username == favorited)
            )
            query = query.where(Article.id.in_(favorited_by))

        return await self._page(db, query, viewer, limit, offset)

    async def get_feed(
        self, db: AsyncSession, viewer: User, limit: int = 20, offset: int = 0
    ) -> MultipleArticlesResponse:
        """Articles by authors the caller follows. No follows → empty result, no article query."""
        result = await db.execute(
            select(Follow.followed_id).where(Follow.follower_id == viewer.id)
        )
        followed_ids = list(result.scalars().all())
        if not followed_ids:
            return MultipleArticlesResponse(articles=[], articles_count=0)

        query = select(Article).where(Article.author_id.in_(followed_ids))
        return await self._page(db, query, viewer, limit, offset)

    async def get_article(
        self, db: AsyncSession, slug: str, viewer: Optional[User] = None
    ) -> SingleArticleResponse:
        article = await self._get_by_slug(db, slug)
        return await self._single(db, article, viewer)

    # ── Writes ────────────────────────────────────────────────────────────
    async def create_article(
        self, db: AsyncSession, author: User, data: NewArticle
    ) -> SingleArticleResponse:
        slug = await self._unique_slug(db, data.title)
        tags = await tag_service.get_or_create_tags(db, data.tag_list or [])

        article = Article(
            slug=slug,
            title=data.title,
            description=data.description,
            body=data.body,
            author=author,
            tags=tags,
        )
        db.add(article)
        await db.flush()
        logger.info("Article created: %s by %s", article.slug, author.username)

        return SingleArticleResponse(
            article=ArticleOut(
                slug=article.slug,
                title=article.title,
                description=article.description,
                body=article.body,
                tag_list=[tag.name for tag in tags],
                created_at=article.created_at,
                updated_at=article.updated_at,
                favorited=False,
                favorites_count=0,
                author=Profile.from_user(author, following=False),
            )
        )

    async def update_article(
        self, db: AsyncSession, user: User, slug: str, data: UpdateArticle
    ) -> SingleArticleResponse:
        """
        Supplied fields overwrite; a supplied tagList replaces every tag link.

        Raises:
            NotFoundError: unknown slug
            ForbiddenError: caller is not the author
        """
        article = await self._get_by_slug(db, slug)
        if article.author_id != user.id:
            raise ForbiddenError("You are not authorized to update this article")

        if data.title is not None:
            article.title = data.title
        if data.description is not None:
            article.description = data.description
        if data.body is not None:
            article.body = data.body
        if data.tag_list is not None:
            article.tags = await tag_service.get_or_create_tags(db, data.tag_list)

        await db.flush()
        logger.info("Article updated: %s", article.slug)
        return await self._single(db, article, user)

    async def delete_article(
        self, db: AsyncSession, user: User, slug: str
    ) -> MessageResponse:
        """
        Deletes the article with its comments, favorites and tag links.
        Tag rows themselves are kept.
        """
        article = await self._get_by_slug(db, slug)
        if article.author_id != user.id:
            raise ForbiddenError("You are not authorized to delete this article")

        await db.execute(delete(Comment).where(Comment.article_id == article.id))
        await db.execute(delete(Favorite).where(Favorite.article_id == article.id))
        await db.execute(
            delete(article_tags).where(article_tags.c.article_id == article.id)
        )
        await db.execute(delete(Article).where(Article.id == article.id))
        logger.info("Article deleted: %s by %s", slug, user.username)
        return MessageResponse(message="Article deleted successfully")

    # ── Favorites ─────────────────────────────────────────────────────────
    async def favorite_article(
        self, db: AsyncSession, user: User, slug: str
    ) -> SingleArticleResponse:
        """Idempotent: favoriting twice keeps a single row and a single count."""
        article = await self._get_by_slug(db, slug)
        existing = await db.execute(
            select(Favorite.article_id).where(
                Favorite.user_id == user.id,
                Favorite.article_id == article.id,
            )
        )
        if existing.first() is None:
            db.add(Favorite(user_id=user.id, article_id=article.id))
            await db.flush()
            logger.info("Article favorited: %s by %s", slug, user.username)
        return await self._single(db, article, user)

    async def unfavorite_article(
        self, db: AsyncSession, user: User, slug: str
    ) -> SingleArticleResponse:
        article = await self._get_by_slug(db, slug)
        await db.execute(
            delete(Favorite).where(
                Favorite.user_id == user.id,
                Favorite.article_id == article.id,
            )
        )
        return await self._single(db, article, user)


# Module-level singleton
article_service = ArticleService()
