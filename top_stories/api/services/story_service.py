"""Story Service: cache-first, paginated lookup of upstream top stories.

A cache miss fetches the ranked id list, caps it, resolves only the ids inside
the requested page window and (optionally) filters them by title. The page is
cached for 10 minutes unless the ranked list was empty.
"""

import asyncio
from datetime import timedelta

from pydantic import TypeAdapter

from top_stories.api.schemas.stories import Story, StoryPage
from top_stories.api.services.cache import Cache
from top_stories.api.services.http_fetcher import HttpFetcher
from top_stories.config.settings import PipelineSettings, UpstreamSettings
from top_stories.errors import UpstreamFetchError
from top_stories.utils.logging_config import get_logger

logger = get_logger(__name__)

CACHE_KEY_TEMPLATE = "stories_page_{page}_title_{search_title}"
CACHE_TTL = timedelta(minutes=10)

_story_ids_adapter = TypeAdapter(list[int])


def build_cache_key(page: int, search_title: str | None) -> str:
    """Cache key for a page/search pair; ``None`` formats as an empty string."""
    return CACHE_KEY_TEMPLATE.format(
        page=page,
        search_title="" if search_title is None else search_title,
    )


def page_window(page: int, page_size: int, total: int) -> range:
    """Zero-based indices of *page* clipped to ``[0, total)``."""
    start = (page - 1) * page_size
    stop = min(page * page_size, total)
    return range(max(start, 0), max(stop, 0))


def title_matches(story: Story, search_title: str | None) -> bool:
    if not search_title:
        return True
    if story.title is None:
        return False
    return search_title.lower() in story.title.lower()


class StoryService:
    """Resolves pages of top stories through an injected fetcher and cache."""

    def __init__(
        self,
        fetcher: HttpFetcher,
        cache: Cache,
        upstream: UpstreamSettings,
        pipeline: PipelineSettings,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._upstream = upstream
        self._pipeline = pipeline

    async def get_stories(
        self,
        page: int = 1,
        page_size: int = 10,
        search_title: str | None = None,
    ) -> StoryPage:
        """Return one page of stories, from cache when available.

        Raises:
            UpstreamFetchError: any upstream request or parse failed. Nothing
                is cached in that case.
        """
        cache_key = build_cache_key(page, search_title)

        found, cached = self._cache.try_get(cache_key)
        if found:
            logger.debug("Story page served from cache", cache_key=cache_key)
            return cached

        try:
            story_ids = await self._fetch_ranked_ids()
            window_ids = [story_ids[i] for i in page_window(page, page_size, len(story_ids))]
            fetched = await self._fetch_stories(window_ids)
        except Exception as exc:
            logger.exception(
                UpstreamFetchError.MESSAGE,
                page=page,
                page_size=page_size,
                search_title=search_title,
            )
            raise UpstreamFetchError(exc) from exc

        stories = [story for story in fetched if title_matches(story, search_title)]
        total_count = len(story_ids) if not search_title else len(stories)
        result = StoryPage(stories=stories, total_count=total_count)

        logger.info(
            "Fetched story page",
            page=page,
            page_size=page_size,
            searched=bool(search_title),
            fetched=len(fetched),
            returned=len(stories),
            total_count=total_count,
        )

        if story_ids:
            self._cache.set(cache_key, result, CACHE_TTL)
            logger.debug("Story page cached", cache_key=cache_key)

        return result

    async def _fetch_ranked_ids(self) -> list[int]:
        payload = await self._fetcher.get_json(self._upstream.top_stories_url)
        story_ids = _story_ids_adapter.validate_python(payload)
        return story_ids[: self._pipeline.total_stories_count]

    async def _fetch_story(self, story_id: int) -> Story:
        payload = await self._fetcher.get_json(self._upstream.item_url(story_id))
        return Story.model_validate(payload)

    async def _fetch_stories(self, story_ids: list[int]) -> list[Story]:
        concurrency = self._pipeline.item_fetch_concurrency
        if concurrency <= 1 or len(story_ids) <= 1:
            return [await self._fetch_story(story_id) for story_id in story_ids]

        # TaskGroup cancels the remaining fetches as soon as one fails
        semaphore = asyncio.Semaphore(concurrency)

        async def _bounded(story_id: int) -> Story:
            async with semaphore:
                return await self._fetch_story(story_id)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(_bounded(story_id)) for story_id in story_ids]
        except ExceptionGroup as eg:
            raise eg.exceptions[0]

        return [task.result() for task in tasks]
