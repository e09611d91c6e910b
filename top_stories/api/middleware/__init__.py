"""API middleware."""

from top_stories.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
