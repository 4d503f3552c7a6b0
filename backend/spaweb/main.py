"""
SPA Web Provider application
Single FastAPI app serving a compiled frontend bundle under a configurable prefix
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from spaweb.api.web import WebProvider
from spaweb.core.base_path import normalize_base_path
from spaweb.core.config import Settings, settings as default_settings
from spaweb.core.middleware import RequestLoggingMiddleware


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stdout at the configured level"""
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. A missing or invalid web directory raises
    ConfigurationError here, before anything is served.
    """
    settings = settings or default_settings
    serve_config = settings.get_serve_config()
    provider = WebProvider(serve_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        logger.info(f"Serving {provider.root} at {normalize_base_path(serve_config.mount_prefix)}")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Serves a single-page application bundle with runtime configuration",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.web_provider = provider

    @app.get("/healthz")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "components": {
                "web_directory": provider.root,
                "base_path": normalize_base_path(serve_config.mount_prefix),
                "index_processed": provider.processor.computed,
            },
        }

    # Catch-all routes go last so they never shadow /healthz
    provider.add_to_router(app, cache_max_age=settings.WEB_CACHE_MAX_AGE)
    app.add_middleware(RequestLoggingMiddleware)
    return app


if __name__ == "__main__":
    import uvicorn

    configure_logging("DEBUG" if default_settings.DEBUG else default_settings.LOG_LEVEL)
    uvicorn.run(
        create_app(default_settings),
        host=default_settings.HOST,
        port=default_settings.PORT,
    )
