from sqlalchemy import Column, String, DateTime

from bjjlib.database import Base
from bjjlib.utils.clock import utcnow


class AdminSession(Base):
    """Opaque admin session token with a hard expiry."""

    __tablename__ = "admin_sessions"

    id = Column(String(64), primary_key=True)  # hex-encoded 32 random bytes
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    def is_valid(self, now) -> bool:
        """A session authorizes requests only while now < expires_at."""
        return now < self.expires_at
