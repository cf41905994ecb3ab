"""
Conduit Backend — Shared Schema Base Classes
==============================================

What:  Base models that give every schema the API's camelCase field names.
How:   alias_generator=to_camel maps `tag_list` ⇄ `tagList`; populate_by_name
       lets services construct models with Python names. FastAPI serializes
       responses by alias, so clients only ever see camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    """Returned by DELETE endpoints, e.g. {"message": "Article deleted successfully"}."""

    message: str = Field(description="Human-readable outcome")


class HealthResponse(BaseModel):
    """
    Returned by GET /health.

    `status` stays "UP" while the process serves requests; `database`
    reports the probe result separately so monitors can alert on it.
    """
    status: str = Field(default="UP")
    message: str = Field(default="Server is running")
    version: str
    database: str = Field(description="connected | disconnected")
    uptime_seconds: float
