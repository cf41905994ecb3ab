"""
Conduit Backend — Profile Service
===================================

What:  Public profiles and the follow graph.
How:   Follow rows live in `user_follows` keyed by (follower_id, followed_id).
       Follow and unfollow are idempotent: a repeated follow finds the row and
       does nothing, a repeated unfollow deletes zero rows.
Who:   Profile routes; ArticleService and CommentService use the batch
       `following_ids` helper to annotate authors.
"""

import logging
from typing import Iterable, Optional, Set

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.exceptions import NotFoundError, ValidationError
from conduit.models.follow import Follow
from conduit.models.user import User
from conduit.schemas.profile import Profile, ProfileResponse

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Stateless; every call receives the request's session.

    Following flags are always computed for the caller. Anonymous callers
    (viewer=None) see following=false everywhere.
    """

    async def get_user_by_username(self, db: AsyncSession, username: str) -> User:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", resource_id=username)
        return user

    async def is_following(
        self, db: AsyncSession, follower_id: Optional[int], followed_id: int
    ) -> bool:
        if follower_id is None:
            return False
        result = await db.execute(
            select(Follow.followed_id).where(
                Follow.follower_id == follower_id,
                Follow.followed_id == followed_id,
            )
        )
        return result.first() is not None

    async def following_ids(
        self,
        db: AsyncSession,
        follower_id: Optional[int],
        candidate_ids: Iterable[int],
    ) -> Set[int]:
        """
        Which of `candidate_ids` the follower follows, in one query.

        Returns an empty set for anonymous callers without querying.
        """
        candidates = set(candidate_ids)
        if follower_id is None or not candidates:
            return set()
        result = await db.execute(
            select(Follow.followed_id).where(
                Follow.follower_id == follower_id,
                Follow.followed_id.in_(candidates),
            )
        )
        return set(result.scalars().all())

    async def get_profile(
        self, db: AsyncSession, username: str, viewer: Optional[User] = None
    ) -> ProfileResponse:
        user = await self.get_user_by_username(db, username)
        following = await self.is_following(db, viewer.id if viewer else None, user.id)
        return ProfileResponse(profile=Profile.from_user(user, following=following))

    async def follow_user(
        self, db: AsyncSession, follower: User, username: str
    ) -> ProfileResponse:
        """
        Raises:
            NotFoundError: unknown username
            ValidationError: the caller tried to follow themselves
        """
        target = await self.get_user_by_username(db, username)
        if target.id == follower.id:
            raise ValidationError.for_field("username", "You can't follow yourself")

        if not await self.is_following(db, follower.id, target.id):
            db.add(Follow(follower_id=follower.id, followed_id=target.id))
            await db.flush()
            logger.info("User %s followed %s", follower.username, target.username)

        return ProfileResponse(profile=Profile.from_user(target, following=True))

    async def unfollow_user(
        self, db: AsyncSession, follower: User, username: str
    ) -> ProfileResponse:
        target = await self.get_user_by_username(db, username)
        result = await db.execute(
            delete(Follow).where(
                Follow.follower_id == follower.id,
                Follow.followed_id == target.id,
            )
        )
        if result.rowcount:
            logger.info("User %s unfollowed %s", follower.username, target.username)
        return ProfileResponse(profile=Profile.from_user(target, following=False))


# Module-level singleton
profile_service = ProfileService()
