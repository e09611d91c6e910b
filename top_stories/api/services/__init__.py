"""API Services.

One ``StoryService`` is built per process by the app lifespan and handed to
routes through the ``get_story_service`` dependency.
"""

from typing import Optional

from top_stories.api.services.cache import Cache, MemoryCache
from top_stories.api.services.http_fetcher import HttpFetcher, HttpxFetcher
from top_stories.api.services.story_service import StoryService
from top_stories.config.settings import AppSettings

_story_service: Optional[StoryService] = None
_fetcher: Optional[HttpxFetcher] = None


def init_story_service(settings: AppSettings) -> StoryService:
    """Create the process-wide story service and its HTTP client."""
    global _story_service, _fetcher
    _fetcher = HttpxFetcher(timeout_seconds=settings.upstream.timeout_seconds)
    _story_service = StoryService(
        fetcher=_fetcher,
        cache=MemoryCache(),
        upstream=settings.upstream,
        pipeline=settings.pipeline,
    )
    return _story_service


async def shutdown_story_service() -> None:
    """Close the HTTP client and drop the service."""
    global _story_service, _fetcher
    if _fetcher is not None:
        await _fetcher.aclose()
    _fetcher = None
    _story_service = None


def get_story_service() -> StoryService:
    """FastAPI dependency returning the story service singleton."""
    if _story_service is None:
        raise RuntimeError("Story service is not initialized")
    return _story_service


__all__ = [
    "Cache",
    "HttpFetcher",
    "HttpxFetcher",
    "MemoryCache",
    "StoryService",
    "get_story_service",
    "init_story_service",
    "shutdown_story_service",
]
