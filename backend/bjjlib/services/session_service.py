"""Admin session issuing and validation."""

import hmac
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from bjjlib.config import settings
from bjjlib.exceptions import AuthenticationError
from bjjlib.logger import auth_logger
from bjjlib.models.admin_session import AdminSession
from bjjlib.utils import clock


class SessionService:
    """Service for the admin password login and opaque session tokens."""

    TOKEN_BYTES = 32

    @staticmethod
    def verify_password(password: str | None) -> bool:
        """
        Check a login attempt against the configured admin password.

        Login is disabled while no admin password is configured.
        """
        if not settings.admin_password or not password:
            return False
        return hmac.compare_digest(
            password.encode("utf-8"), settings.admin_password.encode("utf-8")
        )

    @staticmethod
    def login(db: Session, password: str | None) -> AdminSession:
        """
        Exchange the admin password for a new session.

        Expired sessions are purged on the way.

        Raises:
            AuthenticationError: If the password is wrong or login is disabled
        """
        if not SessionService.verify_password(password):
            auth_logger.warning("Rejected admin login attempt")
            raise AuthenticationError("Invalid password")

        SessionService.cleanup_expired_sessions(db)
        session = SessionService.create_session(db)
        auth_logger.info("Admin session created")
        return session

    @staticmethod
    def create_session(db: Session) -> AdminSession:
        """
        Issue a session token valid for settings.session_ttl_hours.

        Returns:
            The stored session; its id is the token handed to the client
        """
        now = clock.utcnow()
        session = AdminSession(
            id=secrets.token_hex(SessionService.TOKEN_BYTES),
            created_at=now,
            expires_at=now + timedelta(hours=settings.session_ttl_hours),
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def get_valid_session(db: Session, token: str | None) -> AdminSession | None:
        """
        Look up a session and check it against the wall clock.

        An expired session is deleted on sight and treated exactly like an
        unknown token.

        Returns:
            The session if it exists and now < expires_at, otherwise None
        """
        if not token:
            return None

        session = db.get(AdminSession, token)
        if session is None:
            return None

        if not session.is_valid(clock.utcnow()):
            db.delete(session)
            db.commit()
            auth_logger.info("Removed expired admin session")
            return None

        return session

    @staticmethod
    def validate(db: Session, token: str | None) -> AdminSession:
        """
        Require a currently valid session.

        Raises:
            AuthenticationError: If the token is missing, unknown or expired
        """
        if not token:
            raise AuthenticationError("Authentication required")

        session = SessionService.get_valid_session(db, token)
        if session is None:
            raise AuthenticationError("Invalid or expired session")
        return session

    @staticmethod
    def delete_session(db: Session, token: str | None) -> bool:
        """Revoke a session. Returns False if there was nothing to delete."""
        if not token:
            return False

        session = db.get(AdminSession, token)
        if session is None:
            return False

        db.delete(session)
        db.commit()
        return True

    @staticmethod
    def cleanup_expired_sessions(db: Session) -> int:
        """
        Delete every session past its expiry.

        Housekeeping only: validity is always rechecked at lookup time.

        Returns:
            Number of sessions removed
        """
        removed = (
            db.query(AdminSession)
            .filter(AdminSession.expires_at <= clock.utcnow())
            .delete(synchronize_session=False)
        )
        db.commit()
        if removed:
            auth_logger.info(f"Cleaned up {removed} expired admin sessions")
        return removed
