"""Tests for the optional Redis JSON cache."""

from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from bjjlib.redis_client import RedisClient


@pytest.fixture
def fake_redis():
    fake = MagicMock()
    fake.setex.return_value = True
    with patch("bjjlib.redis_client.redis.from_url", return_value=fake):
        yield fake


def test_disabled_without_url() -> None:
    cache = RedisClient(url="")
    assert cache.client is None
    assert cache.status() == "disabled"
    assert cache.get_json("k") is None
    assert cache.set_json("k", {"a": 1}, 10) is False


def test_unreachable_server_disables_cache(fake_redis) -> None:
    fake_redis.ping.side_effect = RedisConnectionError("refused")
    cache = RedisClient(url="redis://localhost:6399/0")
    assert cache.client is None


def test_json_round_trip_with_prefix(fake_redis) -> None:
    cache = RedisClient(url="redis://localhost:6379/0")

    assert cache.set_json("thumb", {"left_bar": 1.5}, 60) is True
    fake_redis.setex.assert_called_once_with("bjjlib:thumb", 60, '{"left_bar": 1.5}')

    fake_redis.get.return_value = '{"left_bar": 1.5}'
    assert cache.get_json("thumb") == {"left_bar": 1.5}
    fake_redis.get.assert_called_with("bjjlib:thumb")


def test_errors_degrade_to_miss(fake_redis) -> None:
    cache = RedisClient(url="redis://localhost:6379/0")

    fake_redis.get.side_effect = RedisConnectionError("gone")
    assert cache.get_json("k") is None

    fake_redis.setex.side_effect = RedisConnectionError("gone")
    assert cache.set_json("k", 1, 10) is False

    fake_redis.ping.side_effect = RedisConnectionError("gone")
    assert cache.status().startswith("error")


def test_unreadable_entry_is_a_miss(fake_redis) -> None:
    cache = RedisClient(url="redis://localhost:6379/0")
    fake_redis.get.return_value = "{not json"
    assert cache.get_json("k") is None
