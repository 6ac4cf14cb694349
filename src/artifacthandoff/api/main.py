"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from artifacthandoff.infrastructure import get_services, get_settings
from artifacthandoff.infrastructure.log_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    services = get_services()
    services.init()
    logger.info(
        f"Artifact store ready (ttl={settings.artifact_ttl_minutes}min, "
        f"uploader={settings.uploader_backend}, queue={settings.queue_backend})"
    )

    yield

    # Cleanup on shutdown
    logger.info("Shutting down...")
    services.teardown()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Ephemeral catalog generation and chat delivery handoff",
        lifespan=lifespan,
    )

    from artifacthandoff.api.routes import router

    app.include_router(router)

    # Files written by LocalFileUploader are fetched by the chat provider from here
    if settings.uploader_backend == "local":
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
        app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    return app
