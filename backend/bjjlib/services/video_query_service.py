"""Paginated video listing by title search and tag selection."""

from typing import Iterable, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from bjjlib.config import settings
from bjjlib.database import snapshot_read
from bjjlib.models.video import Video
from bjjlib.services.cooccurrence_service import CooccurrenceService


class VideoQueryService:
    """Read side of the library: one page of videos plus the full match count."""

    @staticmethod
    def list_videos(
        db: Session,
        page: int = 1,
        limit: int | None = None,
        search: str | None = None,
        tag_ids: Iterable[int] | None = None,
    ) -> Tuple[List[Video], int]:
        """
        Get one page of videos matching an optional title search and tag selection.

        Candidates are restricted to videos carrying every selected tag, then
        filtered by a case-insensitive title substring, ordered newest first
        (ties by ID, descending) and sliced at offset (page - 1) * limit.

        Args:
            db: Database session
            page: 1-based page number
            limit: Page size (defaults to settings.default_page_size, clamped
                to settings.max_page_size)
            search: Case-insensitive substring to look for in titles
            tag_ids: Selected tag IDs; empty or None disables tag filtering

        Returns:
            Tuple of (videos on the page with tags loaded, total candidates)
        """
        page = max(page, 1)
        limit = min(max(limit or settings.default_page_size, 1), settings.max_page_size)
        selected = CooccurrenceService.selection(tag_ids or [])

        with snapshot_read(db):
            query = db.query(Video)

            if selected:
                matching = CooccurrenceService.matching_videos_query(selected)
                query = query.filter(Video.id.in_(matching))

            if search and search.strip():
                query = query.filter(
                    func.lower(Video.title).contains(search.lower(), autoescape=True)
                )

            # Get total count before pagination
            total = query.count()

            offset = (page - 1) * limit
            if offset >= total:
                return [], total

            videos = (
                query.options(selectinload(Video.tags))
                .order_by(Video.created_at.desc(), Video.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

        return videos, total

    @staticmethod
    def recent_videos(db: Session, limit: int = 1000) -> List[Video]:
        """Newest videos first, without tags (sitemap)."""
        return (
            db.query(Video)
            .order_by(Video.created_at.desc(), Video.id.desc())
            .limit(limit)
            .all()
        )
