"""Pydantic models for the stories API."""

from pydantic import BaseModel, ConfigDict, Field


class Story(BaseModel):
    """A single upstream story; extra upstream fields are ignored.

    Deleted or dead items come back without a title or url.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str | None = None
    url: str | None = None


class StoryPage(BaseModel):
    """One page of stories plus the total count for the query.

    ``total_count`` is the capped ranked-list size for unfiltered queries and
    the number of matches inside the fetched window for searches.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stories: list[Story] = Field(default_factory=list)
    total_count: int = Field(0, alias="totalCount")
