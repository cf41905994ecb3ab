"""
Conduit Backend — Tag Route Handlers
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.schemas.tag import TagsResponse
from conduit.services.tag_service import tag_service

router = APIRouter(tags=["Tags"])


@router.get("/tags", response_model=TagsResponse, summary="List all tags")
async def list_tags(db: AsyncSession = Depends(get_db_session)) -> TagsResponse:
    return await tag_service.list_tags(db)
