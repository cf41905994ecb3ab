"""
Models package - every model is imported here so Base.metadata is complete
for Alembic and for the test schema.
"""
from conduit.models.user import User
from conduit.models.tag import Tag, article_tags
from conduit.models.article import Article
from conduit.models.comment import Comment
from conduit.models.favorite import Favorite
from conduit.models.follow import Follow

__all__ = [
    "User",
    "Tag",
    "article_tags",
    "Article",
    "Comment",
    "Favorite",
    "Follow",
]
