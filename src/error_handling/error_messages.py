"""
Caller-facing error messages for the Smart Restaurants API.

Services raise exceptions carrying these messages; the API boundary turns
any exception into a short message that is safe to return to the browser.
Technical details (SQL, stack traces) never leave the process.
"""
from loguru import logger

from .exceptions import (
    SmartRestaurantsError,
    ValidationError,
    NotFoundError,
    CapacityExceededError,
    DatabaseError,
)


# Validation
MISSING_FIELDS = "Missing fields"
NAME_REQUIRED = "Name is required"
INVALID_RATING = "Rating must be 1–5"
INVALID_PARTY_SIZE = "Party size must be at least 1"
INVALID_DATE = "Invalid date"
INVALID_TIME = "Invalid time"

# Not found
RESTAURANT_NOT_FOUND = "Restaurant not found"
USER_NOT_FOUND = "User not found"
ACTIVE_USER_NOT_FOUND = "Active user not found"
REVIEW_NOT_FOUND = "Review not found"
RESERVATION_NOT_FOUND = "Reservation not found"

# Conflicts
NO_TABLES_AVAILABLE = "No tables available at this time"
ALREADY_FAVORITED = "Already in favorites"
ALREADY_REVIEWED = "You already reviewed this restaurant."

# Internal
INTERNAL_ERROR = "Internal server error"


def get_database_error_message(error: DatabaseError) -> str:
    """Generate message for database errors."""
    if error.error_type == "connection":
        return "The reservation system is temporarily unavailable. Please try again."
    return INTERNAL_ERROR


def get_error_message(error: Exception) -> str:
    """
    Get the caller-facing message for any exception.

    Args:
        error: Exception that occurred

    Returns:
        Message suitable for the ``error`` field of a JSON response
    """
    if isinstance(error, DatabaseError):
        return get_database_error_message(error)
    elif isinstance(error, (ValidationError, NotFoundError, CapacityExceededError)):
        return error.user_message
    elif isinstance(error, SmartRestaurantsError):
        return error.user_message or INTERNAL_ERROR
    else:
        logger.error(f"Unhandled error type: {type(error).__name__}: {str(error)}")
        return INTERNAL_ERROR


def format_request_errors(errors: list) -> str:
    """
    Summarise pydantic request validation errors in one message.

    Missing fields are reported the same way regardless of which field is
    missing; otherwise the first offending field is named.
    """
    if not errors:
        return MISSING_FIELDS
    if any(err.get("type") == "missing" for err in errors):
        return MISSING_FIELDS

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or "request"
    return f"Invalid value for {field}"
