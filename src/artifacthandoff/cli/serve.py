"""Run the handoff API with uvicorn."""

from __future__ import annotations

import uvicorn
from loguru import logger

from artifacthandoff.infrastructure.log_config import configure_logging
from artifacthandoff.infrastructure.settings import get_settings


def main() -> int:
    """Entry point for the API server."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info(f"{settings.app_name} API")
    logger.info("=" * 60)

    uvicorn.run(
        "artifacthandoff.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
