"""
Conduit Backend — Tag Schemas
"""

from typing import List

from pydantic import BaseModel, Field


class TagsResponse(BaseModel):
    tags: List[str] = Field(default_factory=list, description="Tag names, alphabetical")
