"""
Centralized logging configuration for the Smart Restaurants service.

This module configures loguru for structured logging with different
levels and formats for development vs production.
"""
import sys
import functools
import time
from pathlib import Path
from typing import Optional
from loguru import logger


def configure_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    rotation: str = "100 MB",
    retention: str = "30 days",
    format_type: str = "detailed"
) -> None:
    """
    Configure loguru logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        log_dir: Directory for log files
        rotation: When to rotate log files (e.g., "100 MB", "1 day")
        retention: How long to keep old log files
        format_type: Format style ("simple", "detailed", "json")
    """
    # Remove default logger
    logger.remove()

    serialize = format_type == "json"
    if format_type == "simple":
        format_string = "<level>{level: <8}</level> | <level>{message}</level>"
    elif serialize:
        format_string = "{message}"
    else:  # detailed
        format_string = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

    # Console handler (always)
    logger.add(
        sys.stderr,
        format=format_string,
        level=log_level,
        colorize=not serialize,
        serialize=serialize,
        backtrace=True,
        diagnose=False
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # General log file (all levels)
        logger.add(
            log_path / "smart_restaurants_{time:YYYY-MM-DD}.log",
            format=format_string,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=serialize,
            backtrace=True,
            diagnose=False
        )

        # Error log file (ERROR and CRITICAL only)
        logger.add(
            log_path / "errors_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="ERROR",
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

        # Reservation audit trail
        logger.add(
            log_path / "bookings_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="INFO",
            rotation="1 day",
            retention="1 year",
            compression="zip",
            filter=lambda record: record["extra"].get("category") == "BOOKING"
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"file_logging={log_to_file}, "
        f"format={format_type}"
    )


def log_booking_event(
    event_type: str,
    user_id: Optional[int] = None,
    reservation_id: Optional[int] = None,
    details: Optional[dict] = None
) -> None:
    """
    Log a reservation event for the audit trail.

    Args:
        event_type: Type of event (e.g., "CREATED", "REJECTED", "CANCELLED")
        user_id: Booking user, if known
        reservation_id: Reservation identifier
        details: Additional event details
    """
    details = details or {}

    logger.bind(category="BOOKING").info(
        f"BOOKING {event_type} | "
        f"user={user_id} | "
        f"reservation_id={reservation_id} | "
        f"details={details}"
    )


def log_error_with_context(
    error: Exception,
    context: dict,
    severity: str = "ERROR"
) -> None:
    """
    Log an error with full context information.

    Args:
        error: Exception that occurred
        context: Context dictionary with relevant information
        severity: Log severity (ERROR, WARNING, CRITICAL)
    """
    logger.bind(category="ERROR", **context).log(
        severity,
        f"Error occurred: {type(error).__name__}: {str(error)} | context={context}"
    )

    # Stack trace for ERROR and CRITICAL
    if severity in ["ERROR", "CRITICAL"]:
        logger.opt(exception=error).log(severity, "Stack trace:")


class LogContext:
    """
    Context manager for adding context to all logs within a block.

    Example:
        with LogContext(request_id="abc", user_id=3):
            logger.info("Creating reservation")
    """

    def __init__(self, **context):
        self.context = context
        self.token = None

    def __enter__(self):
        self.token = logger.contextualize(**self.context)
        self.token.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token:
            self.token.__exit__(exc_type, exc_val, exc_tb)


def log_performance(operation_name: Optional[str] = None):
    """
    Decorator to log function performance.

    Args:
        operation_name: Name of operation (defaults to function name)

    Example:
        @log_performance("reservation_create")
        def reserve(...):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            name = operation_name or func.__name__
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                logger.bind(category="PERFORMANCE").debug(
                    f"Performance | {name} | "
                    f"duration={duration:.3f}s | "
                    f"success=False | "
                    f"error={type(e).__name__}"
                )
                raise

            duration = time.time() - start_time
            logger.bind(category="PERFORMANCE").debug(
                f"Performance | {name} | "
                f"duration={duration:.3f}s | "
                f"success=True"
            )
            return result

        return wrapper
    return decorator


def init_logging(environment: str = "development", log_level: Optional[str] = None) -> None:
    """
    Initialize logging with environment-specific settings.

    Args:
        environment: Environment name ("development", "production", "test")
        log_level: Optional level overriding the environment default
    """
    if environment == "production":
        configure_logging(
            log_level=log_level or "INFO",
            log_to_file=True,
            format_type="json",
            rotation="100 MB",
            retention="90 days"
        )
    elif environment == "test":
        configure_logging(
            log_level=log_level or "WARNING",
            log_to_file=False,
            format_type="simple"
        )
    else:  # development
        configure_logging(
            log_level=log_level or "DEBUG",
            log_to_file=True,
            format_type="detailed",
            rotation="50 MB",
            retention="7 days"
        )

    logger.info(f"Logging initialized for {environment} environment")
