"""
Conduit Backend — Password Hashing and JWT Tokens
===================================================

What:  bcrypt password hashing (passlib) and JWT issue/verify (python-jose).
Who:   UserService (register, login, update) and the auth dependencies.

Token Claims:
    {"id": <user id>, "username": ..., "email": ..., "exp": <unix seconds>}

    Signed with settings.jwt_secret using settings.jwt_algorithm (HS256).
    Lifetime is settings.jwt_expires_in seconds (default one day).

Verification failures (bad signature, expired, malformed) are not
distinguished: decode_token returns None for all of them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from conduit.config import settings
from conduit.models.user import User

logger = logging.getLogger(__name__)

# ── Password Hashing ──────────────────────────────────────────────────────
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time comparison of a candidate password against a stored hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        logger.warning("Password verification against a malformed hash")
        return False


# ── JWT ───────────────────────────────────────────────────────────────────
def issue_token(user: User) -> str:
    """
    Issues a signed access token for the given user.

    Args:
        user: A persisted user (id must be assigned).

    Returns:
        Compact JWT string, sent by clients as `Authorization: Token <jwt>`.
    """
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.jwt_expires_in)
    claims = {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verifies signature and expiry and returns the claims.

    Returns:
        The claims dict, or None when the token is invalid for any reason.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.debug("Token rejected: %s", e)
        return None
