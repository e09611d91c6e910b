"""API Schemas - Pydantic models for response serialization."""

from top_stories.api.schemas.stories import Story, StoryPage

__all__ = ["Story", "StoryPage"]
