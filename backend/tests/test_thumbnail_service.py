"""Tests for thumbnail bar detection and its cache."""

import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from PIL import Image, ImageDraw

from bjjlib.exceptions import NotFoundError, ValidationError
from bjjlib.services.thumbnail_service import (
    ThumbnailService,
    is_pixel_black,
    measure_bars,
)

THUMBNAIL_URL = "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"


def pillarboxed(width=400, height=200, bar=40) -> Image.Image:
    """White frame with black bars of `bar` pixels on both sides."""
    image = Image.new("RGB", (width, height), (255, 255, 255))
    draw = ImageDraw.Draw(image)
    draw.rectangle([0, 0, bar - 1, height - 1], fill=(0, 0, 0))
    draw.rectangle([width - bar, 0, width - 1, height - 1], fill=(0, 0, 0))
    return image


def png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def cache():
    mock_cache = MagicMock()
    mock_cache.get_json.return_value = None
    return mock_cache


@pytest.fixture
def service(cache):
    return ThumbnailService(cache=cache)


class TestIsPixelBlack:
    @pytest.mark.parametrize("rgb", [(0, 0, 0), (30, 30, 30), (45, 40, 42)])
    def test_black(self, rgb) -> None:
        assert is_pixel_black(rgb)

    @pytest.mark.parametrize("rgb", [(60, 60, 60), (40, 20, 20), (255, 255, 255)])
    def test_not_black(self, rgb) -> None:
        assert not is_pixel_black(rgb)


class TestMeasureBars:
    def test_plain_frame_has_no_bars(self) -> None:
        result = measure_bars(Image.new("RGB", (400, 200), (200, 180, 160)))
        assert result == {"left_bar": 0, "right_bar": 0, "total_percent": 0}

    def test_pillarboxed_frame(self) -> None:
        result = measure_bars(pillarboxed(bar=40))
        assert result["left_bar"] == pytest.approx(10, abs=2)
        assert result["right_bar"] == pytest.approx(10, abs=2)
        assert result["total_percent"] == pytest.approx(
            result["left_bar"] + result["right_bar"]
        )

    def test_too_short_to_sample(self) -> None:
        """Fewer than ten samples per column never counts as a bar."""
        result = measure_bars(Image.new("RGB", (40, 20), (0, 0, 0)))
        assert result["total_percent"] == 0


class TestValidateUrl:
    @pytest.mark.parametrize(
        "url, message",
        [
            (None, "Missing url parameter"),
            ("", "Missing url parameter"),
            ("not a url", "Invalid URL"),
            ("ftp://i.ytimg.com/vi/x.jpg", "Only HTTP/HTTPS URLs allowed"),
            ("https://evil.example.com/x.jpg", "URL host not allowed"),
            ("http://169.254.169.254/latest", "URL host not allowed"),
        ],
    )
    def test_rejected(self, url, message) -> None:
        with pytest.raises(ValidationError, match=message):
            ThumbnailService.validate_url(url)

    def test_allowed(self) -> None:
        assert ThumbnailService.validate_url(THUMBNAIL_URL) == THUMBNAIL_URL


class TestAnalyze:
    def test_fetches_measures_and_caches(self, service, cache) -> None:
        response = MagicMock(content=png_bytes(pillarboxed()))
        with patch(
            "bjjlib.services.thumbnail_service.requests.get", return_value=response
        ) as mock_get:
            result = service.analyze(THUMBNAIL_URL)

        mock_get.assert_called_once()
        assert result["left_bar"] > 0
        key, value, ttl = cache.set_json.call_args.args
        assert key == f"thumbnail_analysis:{THUMBNAIL_URL}"
        assert value == result
        assert ttl == 86400

    def test_cache_hit_skips_fetch(self, service, cache) -> None:
        cached = {"left_bar": 12.5, "right_bar": 12.5, "total_percent": 25.0}
        cache.get_json.return_value = cached

        with patch("bjjlib.services.thumbnail_service.requests.get") as mock_get:
            assert service.analyze(THUMBNAIL_URL) == cached
        mock_get.assert_not_called()

    def test_fetch_failure(self, service) -> None:
        with patch(
            "bjjlib.services.thumbnail_service.requests.get",
            side_effect=requests.ConnectionError("boom"),
        ):
            with pytest.raises(NotFoundError):
                service.analyze(THUMBNAIL_URL)

    def test_not_an_image(self, service, cache) -> None:
        response = MagicMock(content=b"<html>nope</html>")
        with patch("bjjlib.services.thumbnail_service.requests.get", return_value=response):
            with pytest.raises(ValidationError, match="Invalid image"):
                service.analyze(THUMBNAIL_URL)
        cache.set_json.assert_not_called()

    def test_disallowed_host_never_fetched(self, service) -> None:
        with patch("bjjlib.services.thumbnail_service.requests.get") as mock_get:
            with pytest.raises(ValidationError):
                service.analyze("https://example.com/a.jpg")
        mock_get.assert_not_called()
