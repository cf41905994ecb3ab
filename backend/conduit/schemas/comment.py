"""
Conduit Backend — Comment Schemas
===================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from conduit.schemas.common import CamelModel
from conduit.schemas.profile import Profile
from conduit.validation import enforce, length, required

COMMENT_BODY_RULES = (
    required("Comment body cannot be empty"),
    length("Comment must be between 1 and 1000 characters", min=1, max=1000),
)


class NewComment(CamelModel):
    body: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("body")
    @classmethod
    def check_body(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, COMMENT_BODY_RULES)


class NewCommentRequest(CamelModel):
    comment: NewComment


class CommentOut(CamelModel):
    id: int
    body: str
    created_at: datetime
    updated_at: datetime
    author: Profile


class SingleCommentResponse(CamelModel):
    comment: CommentOut


class MultipleCommentsResponse(CamelModel):
    comments: List[CommentOut] = Field(default_factory=list)
