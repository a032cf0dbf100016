from datetime import datetime
from pydantic import BaseModel, ConfigDict

from bjjlib.schemas.tag import TagSummary


class VideoBase(BaseModel):
    """Base video schema."""

    title: str
    url: str
    duration: str | None = None


class VideoCreate(VideoBase):
    """Schema for creating a video."""

    tags: list[str] = []


class VideoResponse(VideoBase):
    """Video response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    tags: list[TagSummary] = []


class VideoUpdate(BaseModel):
    """
    Schema for updating video.

    ``tags``, when present, replaces the video's whole tag set.
    """

    title: str | None = None
    url: str | None = None
    duration: str | None = None
    tags: list[str] | None = None


class PaginatedVideosResponse(BaseModel):
    """Paginated response for videos."""

    videos: list[VideoResponse]
    total: int
    page: int
    limit: int
    total_pages: int
