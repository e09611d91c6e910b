"""API Routes."""

from top_stories.api.routes.stories import router as stories_router

__all__ = ["stories_router"]
