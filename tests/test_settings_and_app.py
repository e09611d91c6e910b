"""Tests for settings resolution and application wiring."""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from top_stories.api.main import create_app
from top_stories.api.middleware import LoggingMiddleware
from top_stories.api.services import StoryService, get_story_service
from top_stories.config.settings import (
    DEFAULT_HN_API_URL,
    get_app_settings,
    resolve_api_settings,
    resolve_pipeline_settings,
    resolve_upstream_settings,
)


def test_defaults_point_at_hacker_news():
    settings = get_app_settings(env={})

    assert settings.upstream.api_url == DEFAULT_HN_API_URL
    assert settings.upstream.top_stories_url == "https://hacker-news.firebaseio.com/v0/topstories.json"
    assert settings.upstream.item_url(42) == "https://hacker-news.firebaseio.com/v0/item/42.json"
    assert settings.pipeline.total_stories_count == 200
    assert settings.pipeline.item_fetch_concurrency == 1
    assert settings.api.cors_allow_origins == ("*",)


def test_urls_are_plain_concatenation():
    upstream = resolve_upstream_settings(
        env={
            "HN_API_URL": "https://api.example.com",
            "HN_TOP_STORIES_ENDPOINT": "/topstories",
            "HN_ITEM_ENDPOINT": "/item/{}",
        }
    )

    assert upstream.top_stories_url == "https://api.example.com/topstories"
    assert upstream.item_url(7) == "https://api.example.com/item/7"


@pytest.mark.parametrize("template", ["item.json", "item/{id}.json", "item/{0}/{1}.json"])
def test_item_endpoint_needs_one_positional_slot(template: str):
    with pytest.raises(ValueError, match="HN_ITEM_ENDPOINT"):
        resolve_upstream_settings(env={"HN_ITEM_ENDPOINT": template})


def test_empty_api_url_is_rejected():
    with pytest.raises(ValueError, match="HN_API_URL"):
        resolve_upstream_settings(env={"HN_API_URL": "  "})


def test_pipeline_values_are_clamped_and_fall_back():
    assert resolve_pipeline_settings(env={"TOTAL_STORIES_COUNT": "9999"}).total_stories_count == 500
    assert resolve_pipeline_settings(env={"TOTAL_STORIES_COUNT": "abc"}).total_stories_count == 200
    assert resolve_pipeline_settings(env={"ITEM_FETCH_CONCURRENCY": "0"}).item_fetch_concurrency == 1
    assert resolve_pipeline_settings(total_stories_count_override=50, env={}).total_stories_count == 50


def test_cors_origins_are_split():
    api = resolve_api_settings(env={"CORS_ALLOW_ORIGINS": "http://a.test, http://b.test,"})

    assert api.cors_allow_origins == ("http://a.test", "http://b.test")


def test_lifespan_wires_story_service_and_health():
    app = create_app(get_app_settings(env={}))

    with TestClient(app) as client:
        assert isinstance(get_story_service(), StoryService)
        response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "top-stories-api"}
    assert response.headers["X-Request-ID"]

    with pytest.raises(RuntimeError):
        get_story_service()


def test_validation_error_does_not_touch_upstream():
    app = create_app(get_app_settings(env={}))

    with TestClient(app) as client:
        response = client.get("/api/stories?page=0")

    assert response.status_code == 400
    assert response.json() == "An error occurred: Invalid page or pageSize"


def test_logging_middleware_binds_story_query_context():
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)

    @app.get("/api/stories")
    async def stories():
        return structlog.contextvars.get_contextvars()

    @app.get("/api/health")
    async def health():
        return structlog.contextvars.get_contextvars()

    client = TestClient(app)
    stories_ctx = client.get("/api/stories?page=2&pageSize=5&searchTitle=rust").json()
    health_ctx = client.get("/api/health?page=2").json()

    assert stories_ctx["query_page"] == "2"
    assert stories_ctx["query_page_size"] == "5"
    assert stories_ctx["query_search_title"] == "rust"
    assert set(health_ctx) == {"request_id"}
