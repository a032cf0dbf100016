from sqlalchemy import Column, Integer, String, ForeignKey, Index
from sqlalchemy.orm import relationship

from bjjlib.database import Base


class Tag(Base):
    """Tag model. Names are stored normalized (lowercase, trimmed)."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    category_id = Column(
        Integer,
        ForeignKey("tag_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    category = relationship("TagCategory", back_populates="tags")
    video_tags = relationship(
        "VideoTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class VideoTag(Base):
    """Association between a video and a tag; the index the filters run over."""

    __tablename__ = "video_tags"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(
        Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag_id = Column(
        Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    video = relationship("Video", back_populates="video_tags")
    tag = relationship("Tag", back_populates="video_tags")

    __table_args__ = (
        Index("idx_video_tag", "video_id", "tag_id", unique=True),
        Index("idx_tag_video", "tag_id", "video_id"),
    )
