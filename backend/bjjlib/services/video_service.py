"""Video create/read/update/delete."""

from typing import List

from sqlalchemy.orm import Session, selectinload

from bjjlib.exceptions import NotFoundError, ValidationError
from bjjlib.logger import api_logger
from bjjlib.models.video import Video
from bjjlib.services.taxonomy_service import TaxonomyService
from bjjlib.services.youtube_service import YouTubeService

_UNSET = object()


def _require_text(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    return cleaned


class VideoService:
    """Service for admin video mutations and single-video reads."""

    def __init__(self, youtube_service: YouTubeService | None = None):
        self.youtube_service = youtube_service or YouTubeService()

    @staticmethod
    def get_video(db: Session, video_id: int) -> Video:
        """Get a video with its tags, or raise NotFoundError."""
        video = (
            db.query(Video)
            .options(selectinload(Video.tags))
            .filter(Video.id == video_id)
            .first()
        )
        if not video:
            raise NotFoundError("Video", video_id)
        return video

    def create_video(
        self,
        db: Session,
        title: str,
        url: str,
        duration: str | None = None,
        tag_names: List[str] | None = None,
    ) -> Video:
        """
        Create a video and link its tags in one transaction.

        When no duration is given, the YouTube lookup is tried first; its
        failure leaves the duration empty and never blocks creation.

        Raises:
            ValidationError: If title, URL or any tag name is blank
        """
        title = _require_text(title, "Title")
        url = _require_text(url, "URL")

        if not duration:
            duration = self.youtube_service.fetch_duration(url)

        video = Video(title=title, url=url, duration=duration or None)
        try:
            db.add(video)
            db.flush()
            if tag_names:
                TaxonomyService.apply_video_tags(db, video, tag_names)
            db.commit()
        except Exception:
            db.rollback()
            raise

        api_logger.info(f"Created video {video.id} ('{title}')")
        return self.get_video(db, video.id)

    def update_video(
        self,
        db: Session,
        video_id: int,
        title: str | None = None,
        url: str | None = None,
        duration=_UNSET,
        tag_names: List[str] | None = None,
    ) -> Video:
        """
        Partially update a video.

        Only the given fields change. ``tag_names``, when not None, replaces
        the whole tag set. Pass ``duration=None`` to clear the duration.

        Raises:
            NotFoundError: If the video doesn't exist
            ValidationError: If a given title/URL/tag name is blank
        """
        video = db.get(Video, video_id)
        if not video:
            raise NotFoundError("Video", video_id)

        try:
            if title is not None:
                video.title = _require_text(title, "Title")
            if url is not None:
                video.url = _require_text(url, "URL")
            if duration is not _UNSET:
                video.duration = duration or None
            if tag_names is not None:
                TaxonomyService.apply_video_tags(db, video, tag_names)
            db.commit()
        except Exception:
            db.rollback()
            raise

        return self.get_video(db, video_id)

    def refresh_duration(self, db: Session, video_id: int) -> Video:
        """Re-run the duration lookup and store whatever it returns."""
        video = db.get(Video, video_id)
        if not video:
            raise NotFoundError("Video", video_id)

        duration = self.youtube_service.fetch_duration(video.url)
        if duration:
            video.duration = duration
            db.commit()
        return self.get_video(db, video_id)

    @staticmethod
    def delete_video(db: Session, video_id: int) -> None:
        """Delete a video; its tag links go with it, the tags stay."""
        video = db.get(Video, video_id)
        if not video:
            raise NotFoundError("Video", video_id)

        try:
            db.delete(video)
            db.commit()
        except Exception:
            db.rollback()
            raise

        api_logger.info(f"Deleted video {video_id}")
