"""Application settings and runtime config resolution.

Environment-backed defaults for the upstream story source, the lookup
pipeline and the HTTP server. Everything is resolved once at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from string import Formatter
from typing import Mapping

# Upstream env names and defaults
ENV_HN_API_URL = "HN_API_URL"
ENV_HN_TOP_STORIES_ENDPOINT = "HN_TOP_STORIES_ENDPOINT"
ENV_HN_ITEM_ENDPOINT = "HN_ITEM_ENDPOINT"
ENV_HTTP_TIMEOUT_SECONDS = "HTTP_TIMEOUT_SECONDS"

DEFAULT_HN_API_URL = "https://hacker-news.firebaseio.com/v0/"
DEFAULT_HN_TOP_STORIES_ENDPOINT = "topstories.json"
DEFAULT_HN_ITEM_ENDPOINT = "item/{0}.json"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30

# Pipeline env names and defaults
ENV_TOTAL_STORIES_COUNT = "TOTAL_STORIES_COUNT"
ENV_ITEM_FETCH_CONCURRENCY = "ITEM_FETCH_CONCURRENCY"

DEFAULT_TOTAL_STORIES_COUNT = 200
DEFAULT_ITEM_FETCH_CONCURRENCY = 1

# API env names and defaults
ENV_API_HOST = "API_HOST"
ENV_API_PORT = "API_PORT"
ENV_CORS_ALLOW_ORIGINS = "CORS_ALLOW_ORIGINS"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000
DEFAULT_CORS_ALLOW_ORIGINS = ("*",)


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class UpstreamSettings:
    api_url: str
    top_stories_endpoint: str
    item_endpoint: str
    timeout_seconds: int

    @property
    def top_stories_url(self) -> str:
        return self.api_url + self.top_stories_endpoint

    def item_url(self, story_id: int) -> str:
        return self.api_url + self.item_endpoint.format(story_id)


@dataclass(frozen=True)
class PipelineSettings:
    total_stories_count: int
    item_fetch_concurrency: int


@dataclass(frozen=True)
class APISettings:
    host: str
    port: int
    cors_allow_origins: tuple[str, ...]


@dataclass(frozen=True)
class AppSettings:
    upstream: UpstreamSettings
    pipeline: PipelineSettings
    api: APISettings


def _template_fields(template: str) -> list[str]:
    return [field for _, field, _, _ in Formatter().parse(template) if field is not None]


def resolve_upstream_settings(env: Mapping[str, str] = os.environ) -> UpstreamSettings:
    api_url = env.get(ENV_HN_API_URL, DEFAULT_HN_API_URL).strip()
    if not api_url:
        raise ValueError(f"{ENV_HN_API_URL} must not be empty")

    top_stories_endpoint = env.get(ENV_HN_TOP_STORIES_ENDPOINT, DEFAULT_HN_TOP_STORIES_ENDPOINT)
    item_endpoint = env.get(ENV_HN_ITEM_ENDPOINT, DEFAULT_HN_ITEM_ENDPOINT)
    if _template_fields(item_endpoint) not in ([""], ["0"]):
        raise ValueError(
            f"Invalid {ENV_HN_ITEM_ENDPOINT} '{item_endpoint}'. "
            "Expected exactly one positional slot, e.g. 'item/{0}.json'"
        )

    timeout_seconds = _clamp(
        _parse_int(env, ENV_HTTP_TIMEOUT_SECONDS, DEFAULT_HTTP_TIMEOUT_SECONDS),
        1,
        300,
    )

    return UpstreamSettings(
        api_url=api_url,
        top_stories_endpoint=top_stories_endpoint,
        item_endpoint=item_endpoint,
        timeout_seconds=timeout_seconds,
    )


def resolve_pipeline_settings(
    total_stories_count_override: int | None = None,
    item_fetch_concurrency_override: int | None = None,
    env: Mapping[str, str] = os.environ,
) -> PipelineSettings:
    if total_stories_count_override is not None:
        total_stories_count = _clamp(total_stories_count_override, 1, 500)
    else:
        total_stories_count = _clamp(
            _parse_int(env, ENV_TOTAL_STORIES_COUNT, DEFAULT_TOTAL_STORIES_COUNT),
            1,
            500,
        )

    if item_fetch_concurrency_override is not None:
        item_fetch_concurrency = _clamp(item_fetch_concurrency_override, 1, 20)
    else:
        item_fetch_concurrency = _clamp(
            _parse_int(env, ENV_ITEM_FETCH_CONCURRENCY, DEFAULT_ITEM_FETCH_CONCURRENCY),
            1,
            20,
        )

    return PipelineSettings(
        total_stories_count=total_stories_count,
        item_fetch_concurrency=item_fetch_concurrency,
    )


def resolve_api_settings(env: Mapping[str, str] = os.environ) -> APISettings:
    host = env.get(ENV_API_HOST, DEFAULT_API_HOST)
    port = _parse_int(env, ENV_API_PORT, DEFAULT_API_PORT)

    raw_origins = env.get(ENV_CORS_ALLOW_ORIGINS)
    if raw_origins:
        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())
    else:
        origins = ()

    return APISettings(
        host=host,
        port=port,
        cors_allow_origins=origins or DEFAULT_CORS_ALLOW_ORIGINS,
    )


def get_app_settings(env: Mapping[str, str] = os.environ) -> AppSettings:
    return AppSettings(
        upstream=resolve_upstream_settings(env=env),
        pipeline=resolve_pipeline_settings(env=env),
        api=resolve_api_settings(env=env),
    )


def is_production(env: Mapping[str, str] = os.environ) -> bool:
    value = env.get("ENV", env.get("ENVIRONMENT", "development")).lower()
    return value in ("production", "prod")
