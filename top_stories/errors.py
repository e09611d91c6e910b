"""Application error types."""


class TopStoriesError(Exception):
    """Base class for all application-level errors."""

    pass


class InvalidPaginationError(TopStoriesError):
    def __init__(self, page: int | str, page_size: int | str):
        self.page = page
        self.page_size = page_size
        self.message = "Invalid page or pageSize"
        super().__init__(self.message)


class UpstreamFetchError(TopStoriesError):
    """Any failure while contacting or parsing the upstream story source.

    The message is fixed; the original exception is kept on ``cause`` and
    chained as ``__cause__``.
    """

    MESSAGE = "Error fetching top stories."

    def __init__(self, cause: BaseException | None = None):
        self.message = self.MESSAGE
        self.cause = cause
        super().__init__(self.message)
