"""
Conduit Backend — Authentication Dependencies
===============================================

What:  FastAPI dependencies resolving the caller from `Authorization: Token <jwt>`.
How:   Both dependencies depend on get_db_session; FastAPI caches that per
       request, so the user they load lives in the same session the route
       and its service use.
Who:   Route handlers, via Depends(require_auth) or Depends(optional_auth).

    require_auth   missing header     → 401 "Authorization token is missing"
                   bad/expired token  → 401 "Invalid or expired token"
                   unknown user id    → 401 "User not found"

    optional_auth  any of the above   → request continues anonymously (None)
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import get_db_session
from conduit.exceptions import UnauthorizedError
from conduit.models.user import User
from conduit.security import decode_token
from conduit.services.user_service import user_service

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "Token "

# auto_error=False: a missing header is reported with our own message
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Token <jwt>",
)


async def _resolve_user(db: AsyncSession, authorization: Optional[str]) -> User:
    if not authorization or not authorization.startswith(TOKEN_PREFIX):
        raise UnauthorizedError("Authorization token is missing")

    claims = decode_token(authorization[len(TOKEN_PREFIX):].strip())
    if claims is None or not isinstance(claims.get("id"), int):
        raise UnauthorizedError("Invalid or expired token")

    user = await user_service.get_by_id(db, claims["id"])
    if user is None:
        raise UnauthorizedError("User not found", context={"user_id": claims["id"]})
    return user


async def require_auth(
    authorization: Optional[str] = Depends(authorization_header),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await _resolve_user(db, authorization)


async def optional_auth(
    authorization: Optional[str] = Depends(authorization_header),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """The caller if a valid token was sent, else None. Never rejects the request."""
    if not authorization:
        return None
    try:
        return await _resolve_user(db, authorization)
    except UnauthorizedError as e:
        logger.debug("Optional auth ignored: %s", e.message)
        return None
