"""Top stories API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from top_stories.api.schemas.stories import StoryPage
from top_stories.api.services import StoryService, get_story_service
from top_stories.errors import InvalidPaginationError
from top_stories.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/stories", tags=["stories"])


def _bad_request(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=f"An error occurred: {exc}",
    )


def _parse_pagination(page: str, page_size: str) -> tuple[int, int]:
    """Coerce raw query values; anything but positive integers is rejected.

    Taken as strings so a non-numeric value gets the same 400 body as a
    non-positive one instead of FastAPI's 422.
    """
    try:
        parsed_page, parsed_page_size = int(page), int(page_size)
    except ValueError:
        raise InvalidPaginationError(page, page_size) from None

    if parsed_page <= 0 or parsed_page_size <= 0:
        raise InvalidPaginationError(parsed_page, parsed_page_size)
    return parsed_page, parsed_page_size


@router.get(
    "",
    response_model=StoryPage,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Invalid pagination or upstream failure"}},
)
async def get_stories(
    page: str = Query("1", description="Page number for pagination (integer >= 1)."),
    page_size: str = Query(
        "10",
        alias="pageSize",
        description="Number of records a page will display (integer >= 1).",
    ),
    search_title: str | None = Query(
        None,
        alias="searchTitle",
        description="Case-insensitive title filter, applied within the requested page.",
    ),
    story_service: StoryService = Depends(get_story_service),
):
    """Get Hacker News top stories with pagination and title search.

    Results are cached per page and search term for 10 minutes.
    """
    try:
        parsed_page, parsed_page_size = _parse_pagination(page, page_size)
        return await story_service.get_stories(parsed_page, parsed_page_size, search_title)
    except Exception as exc:
        logger.warning("Story request failed", error=str(exc), error_type=type(exc).__name__)
        return _bad_request(exc)
