"""Main entry point - runs the API server."""

import logging

import uvicorn

from basketfx.api.app import create_app
from basketfx.config import get_settings

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting basketfx...")
    logger.info(f"Environment: {settings.environment}")
    if not settings.app_contract_address:
        logger.warning("APP_CONTRACT_ADDRESS not set - transaction endpoints will fail")

    app = create_app()
    logger.info(f"Starting API server on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
