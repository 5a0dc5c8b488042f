"""
Request-scoped FastAPI dependencies: settings and caller identity.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from config import Settings
from models.database import User, get_db
from error_handling.exceptions import AuthenticationError, NotFoundError, ValidationError
from error_handling.error_messages import ACTIVE_USER_NOT_FOUND

USER_HEADER = "X-User-Id"
SESSION_USER_KEY = "user_id"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """
    Resolve the caller's profile for this request, or ``None``.

    The ``X-User-Id`` header wins over the profile selected in the
    client's session cookie.
    """
    raw = request.headers.get(USER_HEADER)
    if raw is None:
        raw = request.session.get(SESSION_USER_KEY)
    if raw is None or raw == "":
        return None

    try:
        user_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id", field="user_id", value=raw)

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(ACTIVE_USER_NOT_FOUND, resource="user", resource_id=user_id)
    return user


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """Raise 401 if the request names no profile."""
    if user is None:
        raise AuthenticationError()
    return user
