from bjjlib.models.video import Video
from bjjlib.models.category import TagCategory
from bjjlib.models.tag import Tag, VideoTag
from bjjlib.models.admin_session import AdminSession

__all__ = [
    "Video",
    "TagCategory",
    "Tag",
    "VideoTag",
    "AdminSession",
]
