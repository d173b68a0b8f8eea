"""
Auth Module - Dependencies
===========================
FastAPI dependencies that resolve the calling user.
These are injected into route handlers via Depends().

Token lookup order: `Authorization: Bearer <jwt>` header, then the
`auth_token` cookie. The token subject is the user id.
"""

import logging

from fastapi import Request, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import AuthenticationError
from common.helpers import safe_int
from common.security import decode_token
from modules.user.models import User

logger = logging.getLogger("shop.auth")


def _extract_token(request: Request):
    auth = request.headers.get("Authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get("auth_token")


def get_current_active_user(request: Request, db: Session = Depends(get_db)):
    """
    Identify the current user from the request token.
    Returns User object or None.
    """
    token = _extract_token(request)
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    user_id = safe_int(payload.get("sub"))
    if user_id is None:
        return None

    return db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712


def require_login(user=Depends(get_current_active_user)):
    """Require an authenticated active user. Raises 401 if not logged in."""
    if not user:
        raise AuthenticationError("Login required.")
    return user
