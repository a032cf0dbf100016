from bjjlib.schemas.auth import LoginRequest, SessionStatus
from bjjlib.schemas.category import (
    CategoryBase,
    CategoryCreate,
    CategoryMove,
    CategoryResponse,
    CategoryUpdate,
)
from bjjlib.schemas.tag import (
    TagBase,
    TagCreate,
    TagResponse,
    TagSummary,
    TagUpdate,
    TagWithCountResponse,
)
from bjjlib.schemas.thumbnail import ThumbnailAnalysis
from bjjlib.schemas.video import (
    VideoBase,
    VideoCreate,
    VideoResponse,
    VideoUpdate,
    PaginatedVideosResponse,
)

__all__ = [
    "LoginRequest",
    "SessionStatus",
    "CategoryBase",
    "CategoryCreate",
    "CategoryMove",
    "CategoryResponse",
    "CategoryUpdate",
    "TagBase",
    "TagCreate",
    "TagResponse",
    "TagSummary",
    "TagUpdate",
    "TagWithCountResponse",
    "ThumbnailAnalysis",
    "VideoBase",
    "VideoCreate",
    "VideoResponse",
    "VideoUpdate",
    "PaginatedVideosResponse",
]
