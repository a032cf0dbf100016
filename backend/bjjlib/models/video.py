from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import relationship

from bjjlib.database import Base
from bjjlib.utils.clock import utcnow


class Video(Base):
    """An externally hosted technique video (YouTube or Vimeo link)."""

    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(500), nullable=False)
    url = Column(Text, nullable=False)

    # Formatted H:MM:SS or M:SS, filled by the duration lookup when available
    duration = Column(String(16), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    video_tags = relationship(
        "VideoTag",
        back_populates="video",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tags = relationship(
        "Tag",
        secondary="video_tags",
        order_by="Tag.name",
        viewonly=True,
    )

    # Newest-first listing
    __table_args__ = (Index("idx_videos_created_id", "created_at", "id"),)
