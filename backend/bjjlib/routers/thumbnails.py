"""Thumbnail analysis router."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query

from bjjlib.schemas.thumbnail import ThumbnailAnalysis
from bjjlib.services.thumbnail_service import ThumbnailService

router = APIRouter()


def get_thumbnail_service() -> ThumbnailService:
    """Dependency for the thumbnail service."""
    return ThumbnailService()


@router.get("/analyze-thumbnail", response_model=ThumbnailAnalysis)
def analyze_thumbnail(
    thumbnail_service: Annotated[ThumbnailService, Depends(get_thumbnail_service)],
    url: str | None = Query(None, description="Thumbnail URL on an allowed CDN host"),
):
    """
    Measure the black side bars of a video thumbnail.

    Only YouTube and Vimeo thumbnail hosts are fetched. Results are cached.
    """
    return thumbnail_service.analyze(url)
