"""
Error handling module for the Smart Restaurants service.

Main Components:
    - exceptions: Custom exception classes mapped to HTTP status codes
    - error_messages: Caller-facing message catalog
    - handlers: Error logging, SQLAlchemy translation and API handlers
    - logging_config: loguru setup and audit logging
"""

from .exceptions import (
    SmartRestaurantsError,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    ConflictError,
    CapacityExceededError,
    DuplicateEntryError,
    DatabaseError,
    DatabaseConnectionError,
    DatabaseQueryError,
)

from .error_messages import get_error_message

from .handlers import (
    log_error,
    handle_database_error,
    handle_errors,
    register_exception_handlers,
)

from .logging_config import (
    configure_logging,
    init_logging,
    log_booking_event,
    log_error_with_context,
    log_performance,
    LogContext,
)

__all__ = [
    # Exceptions
    "SmartRestaurantsError",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "ConflictError",
    "CapacityExceededError",
    "DuplicateEntryError",
    "DatabaseError",
    "DatabaseConnectionError",
    "DatabaseQueryError",

    # Messages
    "get_error_message",

    # Handlers
    "log_error",
    "handle_database_error",
    "handle_errors",
    "register_exception_handlers",

    # Logging
    "configure_logging",
    "init_logging",
    "log_booking_event",
    "log_error_with_context",
    "log_performance",
    "LogContext",
]
