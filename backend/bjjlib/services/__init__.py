from bjjlib.services.cooccurrence_service import CooccurrenceService
from bjjlib.services.video_query_service import VideoQueryService
from bjjlib.services.taxonomy_service import TaxonomyService
from bjjlib.services.video_service import VideoService
from bjjlib.services.session_service import SessionService
from bjjlib.services.youtube_service import YouTubeService
from bjjlib.services.thumbnail_service import ThumbnailService

__all__ = [
    "CooccurrenceService",
    "VideoQueryService",
    "TaxonomyService",
    "VideoService",
    "SessionService",
    "YouTubeService",
    "ThumbnailService",
]
