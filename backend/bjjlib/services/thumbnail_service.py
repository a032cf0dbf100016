"""Letterbox (pillarbox) bar detection for video thumbnails."""

import io
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError

from bjjlib.config import settings
from bjjlib.exceptions import NotFoundError, ValidationError
from bjjlib.logger import api_logger
from bjjlib.redis_client import RedisClient, get_redis

SCALE_FACTOR = 0.25
SAMPLE_STEP = 5
MIN_SAMPLES = 10
BLACK_COLUMN_RATIO = 0.8


def is_pixel_black(rgb: tuple) -> bool:
    """Near-black, near-gray pixel (compression noise tolerated)."""
    r, g, b = rgb[:3]
    max_channel = max(r, g, b)
    channel_diff = max_channel - min(r, g, b)
    brightness = (r + g + b) / 3
    saturation_ratio = channel_diff / max(brightness, 1)
    return max_channel < 50 and channel_diff < 10 and saturation_ratio < 0.25


def measure_bars(image: Image.Image) -> dict:
    """
    Measure black bars on the left and right edges of an image.

    The image is downscaled to a quarter, then columns are scanned inwards
    from each edge (up to 40% of the width) while they are black.

    Returns:
        Dict with left_bar, right_bar and total_percent as % of the width
    """
    width = max(int(image.width * SCALE_FACTOR), 1)
    height = max(int(image.height * SCALE_FACTOR), 1)
    pixels = image.convert("RGB").resize((width, height)).load()

    def is_column_black(x: int) -> bool:
        samples = [pixels[x, y] for y in range(0, height, SAMPLE_STEP)]
        if len(samples) < MIN_SAMPLES:
            return False
        black = sum(1 for rgb in samples if is_pixel_black(rgb))
        return black / len(samples) > BLACK_COLUMN_RATIO

    left_bar = 0
    x = 0
    while x < width * 0.4 and is_column_black(x):
        left_bar = x + 1
        x += 1

    right_bar = 0
    x = width - 1
    while x > width * 0.6 and is_column_black(x):
        right_bar = width - x
        x -= 1

    left_percent = left_bar / width * 100
    right_percent = right_bar / width * 100
    return {
        "left_bar": left_percent,
        "right_bar": right_percent,
        "total_percent": left_percent + right_percent,
    }


class ThumbnailService:
    """Fetches allow-listed thumbnails and caches their bar measurements."""

    CACHE_PREFIX = "thumbnail_analysis:"

    def __init__(self, cache: RedisClient | None = None):
        self.cache = cache or get_redis()

    @staticmethod
    def validate_url(url: str | None) -> str:
        """
        Only http(s) URLs on the thumbnail CDN allow-list may be fetched.

        Raises:
            ValidationError: For a missing, malformed or disallowed URL
        """
        if not url:
            raise ValidationError("Missing url parameter")

        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValidationError("Invalid URL")
        if parsed.scheme not in ("http", "https"):
            raise ValidationError("Only HTTP/HTTPS URLs allowed")
        if parsed.hostname not in settings.thumbnail_allowed_hosts:
            raise ValidationError("URL host not allowed")
        return url

    def analyze(self, url: str | None) -> dict:
        """
        Measure the black bars of a thumbnail, using the cache when possible.

        Raises:
            ValidationError: If the URL is not allowed or the image is invalid
            NotFoundError: If the thumbnail can't be fetched
        """
        url = self.validate_url(url)
        cache_key = f"{self.CACHE_PREFIX}{url}"

        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return cached

        try:
            response = requests.get(url, timeout=settings.thumbnail_fetch_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            api_logger.warning(f"Failed to fetch thumbnail {url}: {e}")
            raise NotFoundError("Thumbnail", url)

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, OSError):
            raise ValidationError("Invalid image")

        result = measure_bars(image)
        self.cache.set_json(cache_key, result, settings.thumbnail_cache_ttl_seconds)
        return result
