"""Videos router: public listing/reads, admin-gated writes."""

import math
from typing import Annotated
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from bjjlib.database import get_db
from bjjlib.dependencies import get_current_admin
from bjjlib.models.admin_session import AdminSession
from bjjlib.config import settings
from bjjlib.schemas.video import (
    PaginatedVideosResponse,
    VideoCreate,
    VideoResponse,
    VideoUpdate,
)
from bjjlib.services.video_query_service import VideoQueryService
from bjjlib.services.video_service import VideoService
from bjjlib.utils.params import parse_id_list, parse_positive_int

router = APIRouter(prefix="/videos")


def get_video_service() -> VideoService:
    """Dependency for the video service."""
    return VideoService()


@router.get("", response_model=PaginatedVideosResponse)
async def list_videos(
    db: Annotated[Session, Depends(get_db)],
    page: str | None = Query(None, description="1-based page number"),
    limit: str | None = Query(None, description="Page size"),
    search: str | None = Query(None, description="Case-insensitive title search"),
    tag_ids: str | None = Query(
        None, alias="tagIds", description="Comma-separated tag IDs (all must match)"
    ),
):
    """
    Get a page of videos, newest first.

    Supports:
    - Filtering to videos that carry every selected tag
    - Case-insensitive title search
    - Pagination with the total match count

    Malformed numbers fall back to their defaults instead of failing.
    """
    page_number = parse_positive_int(page, 1)
    page_size = min(
        parse_positive_int(limit, settings.default_page_size), settings.max_page_size
    )

    videos, total = VideoQueryService.list_videos(
        db,
        page=page_number,
        limit=page_size,
        search=search,
        tag_ids=parse_id_list(tag_ids),
    )

    return PaginatedVideosResponse(
        videos=videos,
        total=total,
        page=page_number,
        limit=page_size,
        total_pages=math.ceil(total / page_size),
    )


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific video by ID."""
    return VideoService.get_video(db, video_id)


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    body: VideoCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """
    Create a video with its tags.

    Unknown tag names are created on the fly. Without an explicit duration
    the YouTube duration lookup is attempted.
    """
    return video_service.create_video(
        db,
        title=body.title,
        url=body.url,
        duration=body.duration,
        tag_names=body.tags,
    )


@router.put("/{video_id}", response_model=VideoResponse)
async def update_video(
    video_id: int,
    body: VideoUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """Update a video; ``tags`` replaces the full tag set when given."""
    changes = body.model_dump(exclude_unset=True)

    kwargs = {
        "title": changes.get("title"),
        "url": changes.get("url"),
        "tag_names": changes.get("tags"),
    }
    if "duration" in changes:
        kwargs["duration"] = changes["duration"]

    return video_service.update_video(db, video_id, **kwargs)


@router.post("/{video_id}/refresh-duration", response_model=VideoResponse)
async def refresh_video_duration(
    video_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """Re-run the YouTube duration lookup for a video."""
    return video_service.refresh_duration(db, video_id)


@router.delete("/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_video(
    video_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Delete a video and its tag links."""
    VideoService.delete_video(db, video_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
