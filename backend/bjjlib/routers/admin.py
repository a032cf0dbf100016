"""Admin session router: password login, logout and session status."""

from typing import Annotated
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bjjlib.config import settings
from bjjlib.database import get_db
from bjjlib.dependencies import get_session_token
from bjjlib.schemas.auth import LoginRequest, SessionStatus
from bjjlib.services.session_service import SessionService

router = APIRouter(prefix="/admin")


@router.post("/login", response_model=SessionStatus)
async def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Exchange the admin password for a session cookie.

    The cookie is httponly, SameSite=lax, secure in production, and expires
    together with the session.
    """
    session = SessionService.login(db, body.password)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.id,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.session_ttl_hours * 3600,
    )
    return SessionStatus(is_admin=True)


@router.post("/logout")
async def logout(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_session_token)],
):
    """Revoke the current session (if any) and clear the cookie."""
    SessionService.delete_session(db, token)
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}


@router.get("/session", response_model=SessionStatus)
async def get_session_status(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_session_token)],
):
    """Report whether the caller is an admin; stale cookies are cleared."""
    if not token:
        return SessionStatus(is_admin=False)

    if SessionService.get_valid_session(db, token) is None:
        response.delete_cookie(settings.session_cookie_name)
        return SessionStatus(is_admin=False)

    return SessionStatus(is_admin=True)
