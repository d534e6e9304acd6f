"""
FastAPI dependencies for authentication and authorization.

Authentication is stateless: the identity comes from the JWT claims alone.
A missing or invalid token means an anonymous request, and the guards below
decide what anonymous and regular users may do.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobly.core.exceptions import ForbiddenError, UnauthorizedError
from jobly.core.security import JWTError, decode_token
from jobly.schemas.user import TokenUser

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>), optional
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenUser]:
    """
    Extract the user from the bearer token, if one is provided.

    Returns None for a missing, malformed, expired or wrongly signed token;
    rejecting anonymous users is left to the guards.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.info("Ignoring invalid bearer token")
        return None

    username = payload.get("sub")
    if not username:
        return None

    return TokenUser(username=username, is_admin=bool(payload.get("is_admin", False)))


def ensure_logged_in(user: Optional[TokenUser] = Depends(get_current_user)) -> TokenUser:
    """Require any authenticated user. Raises UnauthorizedError (401)."""
    if user is None:
        raise UnauthorizedError()
    return user


def ensure_admin(user: Optional[TokenUser] = Depends(get_current_user)) -> TokenUser:
    """Require an authenticated admin. Raises UnauthorizedError (401)."""
    if user is None or not user.is_admin:
        logger.warning(f"Admin access refused for {user.username if user else 'anonymous'}")
        raise UnauthorizedError()
    return user


def ensure_owner_or_admin(
    username: str,
    user: TokenUser = Depends(ensure_logged_in),
) -> TokenUser:
    """
    Require that the token belongs to the user named in the path, or to an admin.

    Raises UnauthorizedError (401) otherwise.
    """
    if user.is_admin or user.username == username:
        return user

    logger.warning(f"User {user.username} refused access to account {username}")
    raise UnauthorizedError()


async def prevent_gain_admin(
    request: Request,
    user: TokenUser = Depends(ensure_logged_in),
) -> TokenUser:
    """
    Stop non-admins from setting isAdmin on any account, their own included.

    Raises ForbiddenError (403).
    """
    if user.is_admin:
        return user

    try:
        body = await request.json()
    except ValueError:
        # Unparseable bodies are reported by request validation
        return user

    if isinstance(body, dict) and ("isAdmin" in body or "is_admin" in body):
        logger.warning(f"User {user.username} attempted to change admin status")
        raise ForbiddenError("Only admins can change admin status")

    return user
