"""
Conduit Backend — Comment Service
===================================

What:  Comments on articles: list, add, delete.
How:   Every operation resolves the article by slug first, so an unknown
       slug is always "Article not found" (404). Comment lookups are scoped
       to that article: a comment id belonging to another article is
       "Comment not found".
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conduit.exceptions import ForbiddenError, NotFoundError
from conduit.models.article import Article
from conduit.models.comment import Comment
from conduit.models.user import User
from conduit.schemas.comment import (
    CommentOut,
    MultipleCommentsResponse,
    NewComment,
    SingleCommentResponse,
)
from conduit.schemas.common import MessageResponse
from conduit.schemas.profile import Profile
from conduit.services.profile_service import profile_service

logger = logging.getLogger(__name__)


class CommentService:

    async def _article_id(self, db: AsyncSession, slug: str) -> int:
        result = await db.execute(select(Article.id).where(Article.slug == slug))
        article_id = result.scalar_one_or_none()
        if article_id is None:
            raise NotFoundError("Article", resource_id=slug)
        return article_id

    def _to_out(self, comment: Comment, following: bool) -> CommentOut:
        return CommentOut(
            id=comment.id,
            body=comment.body,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            author=Profile.from_user(comment.author, following=following),
        )

    async def list_comments(
        self, db: AsyncSession, slug: str, viewer: Optional[User] = None
    ) -> MultipleCommentsResponse:
        """Comments of the article, newest first, authors annotated for the caller."""
        article_id = await self._article_id(db, slug)
        result = await db.execute(
            select(Comment)
            .where(Comment.article_id == article_id)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        comments = result.scalars().all()

        following = await profile_service.following_ids(
            db,
            viewer.id if viewer else None,
            (comment.author_id for comment in comments),
        )
        return MultipleCommentsResponse(
            comments=[
                self._to_out(comment, comment.author_id in following)
                for comment in comments
            ]
        )

    async def add_comment(
        self, db: AsyncSession, author: User, slug: str, data: NewComment
    ) -> SingleCommentResponse:
        article_id = await self._article_id(db, slug)
        comment = Comment(body=data.body, article_id=article_id, author=author)
        db.add(comment)
        await db.flush()
        logger.info("Comment %s added to %s by %s", comment.id, slug, author.username)
        # The author is the caller, who cannot follow themselves
        return SingleCommentResponse(comment=self._to_out(comment, following=False))

    async def delete_comment(
        self, db: AsyncSession, user: User, slug: str, comment_id: int
    ) -> MessageResponse:
        """
        Raises:
            NotFoundError: unknown slug, or no such comment on this article
            ForbiddenError: caller did not write the comment
        """
        article_id = await self._article_id(db, slug)
        result = await db.execute(
            select(Comment).where(
                Comment.id == comment_id,
                Comment.article_id == article_id,
            )
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment", resource_id=str(comment_id))
        if comment.author_id != user.id:
            raise ForbiddenError("You are not authorized to delete this comment")

        await db.delete(comment)
        await db.flush()
        logger.info("Comment %s deleted from %s", comment_id, slug)
        return MessageResponse(message="Comment deleted successfully")


# Module-level singleton
comment_service = CommentService()
