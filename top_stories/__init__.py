"""Top Stories API: a cached, paginated proxy over Hacker News top stories."""

__version__ = "0.1.0"
