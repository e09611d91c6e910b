"""Tests for the in-memory cache and the httpx-backed fetcher."""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from top_stories.api.services.cache import MemoryCache
from top_stories.api.services.http_fetcher import HttpxFetcher

# ---------------------------------------------------------------------------
# MemoryCache
# ---------------------------------------------------------------------------


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_cache_miss_then_hit():
    cache = MemoryCache()

    assert cache.try_get("k") == (False, None)
    cache.set("k", {"v": 1}, timedelta(minutes=10))
    assert cache.try_get("k") == (True, {"v": 1})


def test_cache_entry_expires_at_ttl():
    clock = _Clock()
    cache = MemoryCache(clock=clock)
    cache.set("k", "value", timedelta(seconds=600))

    clock.now = 599.0
    assert cache.try_get("k") == (True, "value")

    clock.now = 600.0
    assert cache.try_get("k") == (False, None)
    assert len(cache) == 0


def test_cache_set_overwrites_and_restarts_ttl():
    clock = _Clock()
    cache = MemoryCache(clock=clock)
    cache.set("k", "old", timedelta(seconds=10))

    clock.now = 8.0
    cache.set("k", "new", timedelta(seconds=10))
    clock.now = 15.0

    assert cache.try_get("k") == (True, "new")


def test_cache_clear():
    cache = MemoryCache()
    cache.set("a", 1, timedelta(minutes=1))
    cache.set("b", 2, timedelta(minutes=1))

    cache.clear()

    assert len(cache) == 0


# ---------------------------------------------------------------------------
# HttpxFetcher
# ---------------------------------------------------------------------------


def _fetcher(handler) -> HttpxFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxFetcher(client=client)


async def test_fetcher_decodes_json():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://hn.example.com/v0/topstories.json"
        return httpx.Response(200, json=[3, 2, 1])

    fetcher = _fetcher(handler)

    assert await fetcher.get_json("https://hn.example.com/v0/topstories.json") == [3, 2, 1]


async def test_fetcher_raises_on_server_error():
    fetcher = _fetcher(lambda request: httpx.Response(503))

    with pytest.raises(httpx.HTTPStatusError):
        await fetcher.get_json("https://hn.example.com/v0/item/1.json")


async def test_fetcher_raises_on_non_json_body():
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ValueError):
        await fetcher.get_json("https://hn.example.com/v0/item/1.json")


async def test_fetcher_does_not_close_injected_client():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=None)))
    fetcher = HttpxFetcher(client=client)

    await fetcher.aclose()

    assert client.is_closed is False
    await client.aclose()
