"""Configuration module for the Top Stories API."""

from top_stories.config.settings import (
    APISettings,
    AppSettings,
    PipelineSettings,
    UpstreamSettings,
    get_app_settings,
)

__all__ = [
    "APISettings",
    "AppSettings",
    "PipelineSettings",
    "UpstreamSettings",
    "get_app_settings",
]
