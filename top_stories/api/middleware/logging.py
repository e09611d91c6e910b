"""
Request Logging Middleware

Request tracing for the stories API.

For each request:
- a short request_id is generated and bound to the structlog context
- on the stories listing, the raw page / pageSize / searchTitle query values
  are bound too, so cache hits, upstream fetches and failures logged by the
  story pipeline can be tied back to the page that was asked for
- completion is logged with status code and duration
- the request_id is echoed back in the X-Request-ID response header
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from top_stories.utils.logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)

STORIES_PATH = "/api/stories"

# Query parameter -> log field
_STORY_QUERY_FIELDS = {
    "page": "query_page",
    "pageSize": "query_page_size",
    "searchTitle": "query_search_title",
}


def _story_query_context(request: Request) -> dict[str, str]:
    """Raw story query values present on the request (unvalidated)."""
    return {
        field: request.query_params[param]
        for param, field in _STORY_QUERY_FIELDS.items()
        if param in request.query_params
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds request context and logs every HTTP request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        # Everything logged while serving this request carries these fields
        bind_context(request_id=request_id)
        if path.rstrip("/") == STORIES_PATH:
            bind_context(**_story_query_context(request))

        # Debug level: the completion line below is the one that matters
        logger.debug("Request started", method=method, path=path, client_ip=client_ip)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000

            # 400s here are bad pagination or upstream failures; surface them
            log_method = logger.info if response.status_code < 400 else logger.warning
            log_method(
                "Request completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            # Let clients quote the id when reporting a failed page
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Request failed with exception",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )
            raise

        finally:
            # Context is per-task; clear it so the next request starts clean
            clear_context()
