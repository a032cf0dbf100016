"""YouTube Data API service for looking up video durations."""

import re

import isodate
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from bjjlib.config import settings
from bjjlib.logger import api_logger

YOUTUBE_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/shorts/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/embed/([^&\n?#]+)"),
]


def get_youtube_video_id(url: str) -> str | None:
    """
    Extract the YouTube video ID from a watch, short, shorts or embed URL.

    Returns:
        The video ID, or None for non-YouTube URLs
    """
    for pattern in YOUTUBE_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def format_duration(iso_duration: str) -> str | None:
    """
    Format an ISO 8601 duration (e.g. PT1H2M3S) as H:MM:SS or M:SS.

    Returns:
        Formatted duration, or None if the value can't be parsed
    """
    try:
        parsed = isodate.parse_duration(iso_duration)
    except (isodate.ISO8601Error, TypeError, ValueError):
        return None

    total_seconds = int(parsed.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class YouTubeService:
    """Service for interacting with YouTube Data API v3."""

    def __init__(self, api_key: str | None = None):
        """Initialize YouTube service with an API key (no user OAuth needed)."""
        self.api_key = settings.youtube_api_key if api_key is None else api_key
        self.youtube = None

    def _initialize_client(self):
        """Initialize YouTube API client lazily."""
        if self.youtube is None:
            self.youtube = build(
                "youtube", "v3", developerKey=self.api_key, cache_discovery=False
            )
        return self.youtube

    def fetch_duration(self, url: str) -> str | None:
        """
        Look up the formatted duration of a YouTube video.

        Never raises: a missing API key, a non-YouTube URL, an unknown video
        or an API failure all yield None so video creation can proceed.

        Args:
            url: Video URL as entered by the admin

        Returns:
            Duration as H:MM:SS / M:SS, or None
        """
        if not self.api_key:
            api_logger.warning("YouTube API key not configured - skipping duration fetch")
            return None

        video_id = get_youtube_video_id(url)
        if not video_id:
            return None

        try:
            response = (
                self._initialize_client()
                .videos()
                .list(part="contentDetails", id=video_id)
                .execute()
            )
        except HttpError as e:
            api_logger.error(f"YouTube API error: {e}")
            return None
        except Exception as e:
            api_logger.error(f"Error fetching YouTube duration for {video_id}: {e}")
            return None

        items = response.get("items", [])
        if not items:
            api_logger.warning(f"No video found for ID: {video_id}")
            return None

        duration = items[0].get("contentDetails", {}).get("duration")
        if not duration:
            return None

        return format_duration(duration)
