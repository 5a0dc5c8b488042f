"""
Main entry point for the Smart Restaurants API server.

Run with ``python src/main.py`` or ``uvicorn main:app --app-dir src``.
"""
import sys

import uvicorn
from loguru import logger

from config import get_settings
from error_handling.logging_config import init_logging
from api.app import create_app

settings = get_settings()
init_logging(settings.environment, settings.log_level)

app = create_app(settings)


def main():
    """
    Main entry point for the API server.
    """
    logger.info("=" * 60)
    logger.info("Smart Restaurants API")
    logger.info("=" * 60)

    try:
        uvicorn.run(app, host=settings.host, port=settings.port)
        return 0

    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
        return 130

    except Exception as e:
        logger.opt(exception=e).error(f"Unexpected error: {e}")
        return 1

    finally:
        logger.info("Server shutting down...")


if __name__ == "__main__":
    sys.exit(main())
