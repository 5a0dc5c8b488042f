"""
FastAPI application factory for the Smart Restaurants REST API.
"""
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from loguru import logger
from starlette.middleware.sessions import SessionMiddleware

from config import Settings, get_settings
from models.database import init_db, create_tables
from error_handling.handlers import register_exception_handlers
from error_handling.logging_config import LogContext
from .routes import router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and prepare its database.

    Args:
        settings: Settings to use; defaults to the environment's settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    init_db(settings.database_url)
    create_tables()

    app = FastAPI(title="Smart Restaurants API", version="1.0.0")
    app.state.settings = settings

    # Per-client active profile lives in a signed cookie
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        with LogContext(request_id=uuid.uuid4().hex[:8]):
            response = await call_next(request)
            logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
            return response

    register_exception_handlers(app)
    app.include_router(router)

    logger.info(f"Smart Restaurants API ready ({settings.environment})")
    return app
