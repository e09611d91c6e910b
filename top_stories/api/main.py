"""
FastAPI Application Entry Point

Serves the paginated Hacker News top stories listing.

Usage:
    uvicorn top_stories.api.main:app --reload --port 8000

Or with the CLI:
    python -m top_stories.api.main
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from top_stories.api.middleware import LoggingMiddleware
from top_stories.api.routes import stories_router
from top_stories.api.services import init_story_service, shutdown_story_service
from top_stories.config.settings import AppSettings, get_app_settings, is_production
from top_stories.utils.logging_config import configure_logging, get_logger

# Load environment variables
load_dotenv()

# Initialize logging (must be called before creating loggers)
configure_logging()

logger = get_logger(__name__)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the API with settings resolved once for the process."""
    if settings is None:
        settings = get_app_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting Top Stories API",
            upstream=settings.upstream.api_url,
            total_stories_count=settings.pipeline.total_stories_count,
            item_fetch_concurrency=settings.pipeline.item_fetch_concurrency,
        )
        init_story_service(settings)

        yield

        logger.info("Shutting down API")
        await shutdown_story_service()

    show_docs = not is_production()
    app = FastAPI(
        title="Top Stories API",
        description="Paginated, searchable Hacker News top stories with a 10-minute page cache",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
    )

    # Logging middleware first for accurate timing
    app.add_middleware(LoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.api.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(stories_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "top-stories-api"}

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    api_settings = get_app_settings().api

    uvicorn.run(
        "top_stories.api.main:app",
        host=api_settings.host,
        port=api_settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
