"""
Stall Orders — Security helpers (JWT decode + admin allow-list)
"""
from typing import Any

from fastapi import Request
from jose import jwt

from stall_orders.core.config import get_settings
from stall_orders.core.errors import Unauthorized

settings = get_settings()


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT. Raises JWTError on failure."""
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def is_admin_email(email: str | None) -> bool:
    if not email:
        return False
    allowed = {e.strip().lower() for e in settings.ADMIN_EMAILS}
    return email.strip().lower() in allowed


def require_admin(request: Request) -> dict[str, Any]:
    """
    FastAPI dependency for admin routes.
    JWTAuthMiddleware has already authenticated the caller; this only
    checks the email claim against the configured allow-list.
    """
    user = getattr(request.state, "user", None) or {}
    if not is_admin_email(user.get("email")):
        raise Unauthorized("Unauthorized access. You are not an admin.")
    return user
