"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bjjlib.config import settings
from bjjlib.database import get_db
from bjjlib.models.admin_session import AdminSession
from bjjlib.services.session_service import SessionService


def get_session_token(request: Request) -> str | None:
    """Admin session token from the session cookie, if any."""
    return request.cookies.get(settings.session_cookie_name)


def get_current_admin(
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_session_token)],
) -> AdminSession:
    """
    Gate for admin mutations.

    Runs before the endpoint touches the store. A missing, unknown or
    expired session raises AuthenticationError, whose handler answers 401
    and clears the cookie.
    """
    return SessionService.validate(db, token)
