"""Shared FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from leettrack.Core.config import get_settings

logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=True)


class CurrentUser(BaseModel):
    """Minimal identity taken from the verified token."""
    id: str
    role: str
    handle: Optional[str] = None


@lru_cache()
def _admin_roles() -> set[str]:
    return {"admin", "superadmin"}


def decode_token(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    try:
        claims = decode_token(credentials.credentials)
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials") from exc

    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing subject")

    current = CurrentUser(id=str(user_id), role=(claims.get("role") or "student"), handle=claims.get("handle"))

    request_id = getattr(request.state, "request_id", None)
    logger.info(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        request_id,
        request.url.path,
    )
    return current


def is_admin(user: CurrentUser) -> bool:
    return user.role.lower() in _admin_roles()


def require_role(*roles: str) -> Callable:
    """Factory returning dependency enforcing that user has one of the roles.

    Admins pass every role check. Empty ``roles`` means any authenticated user.
    """
    normalized = {r.lower() for r in roles if r}

    async def _checker(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not normalized:
            return current
        if current.role.lower() in normalized or is_admin(current):
            return current
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")

    return _checker


def require_admin() -> Callable:
    return require_role("admin")


def ensure_admin_or_own_handle(user: CurrentUser, handle: str) -> None:
    if is_admin(user):
        return
    if user.handle and user.handle.strip().lower() == handle.strip().lower():
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized for this student")
