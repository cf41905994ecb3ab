"""
Conduit Backend — Article Request/Response Schemas
====================================================

What:  Create/update bodies and the article payload with per-caller flags.
Who:   ArticleService builds the responses; the article routes accept the requests.

Response shape (camelCase on the wire):

    {
        "slug", "title", "description", "body", "tagList",
        "createdAt", "updatedAt", "favorited", "favoritesCount",
        "author": {"username", "bio", "image", "following"}
    }
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from conduit.schemas.common import CamelModel
from conduit.schemas.profile import Profile
from conduit.validation import enforce, enforce_optional, length, required

TITLE_LENGTH = length("Title must be between 1 and 255 characters", min=1, max=255)
DESCRIPTION_LENGTH = length(
    "Description must be between 1 and 255 characters", min=1, max=255
)
BODY_REQUIRED = required("Body cannot be empty")

TITLE_RULES = (required("Title cannot be empty"), TITLE_LENGTH)
DESCRIPTION_RULES = (required("Description cannot be empty"), DESCRIPTION_LENGTH)


def _check_tag_list(v: Any) -> Any:
    if v is not None and not isinstance(v, list):
        raise PydanticCustomError(
            "field_rules",
            "TagList must be an array",
            {"messages": ["TagList must be an array"]},
        )
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NewArticle(CamelModel):
    title: Optional[str] = Field(default=None, validate_default=True)
    description: Optional[str] = Field(default=None, validate_default=True)
    body: Optional[str] = Field(default=None, validate_default=True)
    tag_list: Optional[List[str]] = Field(default=None)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, TITLE_RULES)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, DESCRIPTION_RULES)

    @field_validator("body")
    @classmethod
    def check_body(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, (BODY_REQUIRED,))

    # mode="before": a string or object must report the array message, not
    # Pydantic's generic list error
    @field_validator("tag_list", mode="before")
    @classmethod
    def check_tag_list(cls, v: Any) -> Any:
        return _check_tag_list(v)


class NewArticleRequest(CamelModel):
    article: NewArticle


class UpdateArticle(CamelModel):
    """Partial update; the slug is never regenerated, even when the title changes."""
    title: Optional[str] = None
    description: Optional[str] = None
    body: Optional[str] = None
    tag_list: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (TITLE_LENGTH,))

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (DESCRIPTION_LENGTH,))

    @field_validator("body")
    @classmethod
    def check_body(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (BODY_REQUIRED,))

    @field_validator("tag_list", mode="before")
    @classmethod
    def check_tag_list(cls, v: Any) -> Any:
        return _check_tag_list(v)


class UpdateArticleRequest(CamelModel):
    article: UpdateArticle


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ArticleOut(CamelModel):
    slug: str
    title: str
    description: str
    body: str
    tag_list: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    favorited: bool = Field(default=False)
    favorites_count: int = Field(default=0)
    author: Profile


class SingleArticleResponse(CamelModel):
    article: ArticleOut


class MultipleArticlesResponse(CamelModel):
    """
    articlesCount covers the whole filtered set, not just this page, so
    clients can render pagination from it.
    """
    articles: List[ArticleOut] = Field(default_factory=list)
    articles_count: int = Field(default=0)
