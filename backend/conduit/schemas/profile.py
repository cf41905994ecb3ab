"""
Conduit Backend — Profile Schemas
===================================

What:  Public view of a user, annotated for the caller.
Who:   Returned by the profile endpoints and embedded as `author` in article
       and comment payloads.
"""

from pydantic import Field

from conduit.models.user import User
from conduit.schemas.common import CamelModel


class Profile(CamelModel):
    """
    Why `following`: per-caller flag, always false for anonymous callers.
    bio / image are "" when the user never set them.
    """
    username: str
    bio: str = Field(default="")
    image: str = Field(default="")
    following: bool = Field(default=False)

    @classmethod
    def from_user(cls, user: User, following: bool = False) -> "Profile":
        return cls(
            username=user.username,
            bio=user.bio or "",
            image=user.image or "",
            following=following,
        )


class ProfileResponse(CamelModel):
    profile: Profile
