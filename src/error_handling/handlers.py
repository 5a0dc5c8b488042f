"""
Centralized error handling utilities for the Smart Restaurants service.

This module provides utilities for:
- Error logging with context
- Translating storage-layer exceptions into the service hierarchy
- Mapping every exception to a JSON response at the API boundary
"""
import functools
from typing import Optional, Callable, Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError, OperationalError, DisconnectionError

from .exceptions import (
    SmartRestaurantsError,
    ValidationError,
    NotFoundError,
    ConflictError,
    AuthenticationError,
    DatabaseError,
    DatabaseConnectionError,
    DatabaseQueryError,
)
from .error_messages import get_error_message, format_request_errors, INTERNAL_ERROR
from .logging_config import log_error_with_context


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an error with a severity matching its category.

    Client errors are expected traffic and logged as warnings without a
    stack trace; anything else is logged as an error with one.

    Args:
        error: Exception that occurred
        context: Request or operation context
    """
    context = dict(context or {})
    if isinstance(error, SmartRestaurantsError):
        context.update({k: v for k, v in error.context.items() if v is not None})

    if isinstance(error, (ValidationError, NotFoundError, ConflictError, AuthenticationError)):
        logger.warning(f"{type(error).__name__}: {error.message} | context={context}")
    else:
        log_error_with_context(error, context, severity="ERROR")


def handle_database_error(error: SQLAlchemyError, operation: str) -> DatabaseError:
    """
    Convert a SQLAlchemy exception into a DatabaseError.

    Args:
        error: Exception raised by SQLAlchemy
        operation: Name of the operation that failed

    Returns:
        DatabaseError subclass wrapping the original exception
    """
    if isinstance(error, (OperationalError, DisconnectionError)):
        return DatabaseConnectionError(
            f"Database operation failed during {operation}: {error}",
            operation=operation,
            original_error=error
        )
    return DatabaseQueryError(
        f"Database query failed during {operation}: {error}",
        operation=operation,
        original_error=error
    )


def handle_errors(operation: Optional[str] = None):
    """
    Decorator for service methods that touch the database.

    Rolls back ``self.session`` and converts SQLAlchemy exceptions into
    DatabaseError. Service exceptions roll back and propagate unchanged.

    Args:
        operation: Operation name for logs (defaults to function name)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            name = operation or func.__name__
            try:
                return func(self, *args, **kwargs)
            except SmartRestaurantsError:
                self.session.rollback()
                raise
            except SQLAlchemyError as e:
                self.session.rollback()
                raise handle_database_error(e, name) from e

        return wrapper
    return decorator


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the JSON error mapping on a FastAPI application.

    ValidationError -> 400, AuthenticationError -> 401, NotFoundError -> 404,
    ConflictError -> 409, everything else -> 500 without internals.
    """

    @app.exception_handler(SmartRestaurantsError)
    async def smart_restaurants_error_handler(request: Request, exc: SmartRestaurantsError):
        log_error(exc, {"method": request.method, "path": request.url.path})
        return _error_response(exc.status_code, get_error_message(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        message = format_request_errors(exc.errors())
        logger.warning(
            f"Request validation failed | {request.method} {request.url.path} | {message}"
        )
        return _error_response(400, message)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        error = handle_database_error(exc, f"{request.method} {request.url.path}")
        log_error(error, {"method": request.method, "path": request.url.path})
        return _error_response(500, get_error_message(error))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        log_error(exc, {"method": request.method, "path": request.url.path})
        return _error_response(500, INTERNAL_ERROR)
