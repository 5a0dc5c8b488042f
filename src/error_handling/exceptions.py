"""
Custom Exception Classes for the Smart Restaurants service.

This module defines exception classes for the error categories surfaced by
the REST API:
- Validation errors (missing or malformed fields) -> 400
- Not found errors (absent or not owned) -> 404
- Conflict errors (capacity exceeded, duplicates) -> 409
- Database errors (storage failures) -> 500

Each exception carries a user-facing message, a status code and context
for logging.
"""

from typing import Optional, Any, Dict


class SmartRestaurantsError(Exception):
    """Base exception for all Smart Restaurants errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True
    ):
        """
        Initialize the error.

        Args:
            message: Technical error message for logging
            user_message: Message returned to the API caller
            context: Additional context for logging
            recoverable: Whether the caller can fix the request and retry
        """
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.context = context or {}
        self.recoverable = recoverable


# ============================================================================
# Client Errors
# ============================================================================

class ValidationError(SmartRestaurantsError):
    """
    Raised when a request is missing required fields or has malformed ones.

    Examples:
    - Blank reservation name or profile name
    - Party size below 1
    - Rating outside 1-5
    - Unparsable date or time
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            user_message: Caller-facing message
            field: Field that failed validation
            value: Invalid value
            **kwargs: Additional context
        """
        context = {
            "field": field,
            "value": value,
            **kwargs
        }
        super().__init__(message, user_message, context, recoverable=True)
        self.field = field
        self.value = value


class NotFoundError(SmartRestaurantsError):
    """
    Raised when a referenced restaurant, user, review or reservation is
    absent, or exists but is not owned by the caller.
    """

    status_code = 404

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        resource_id: Optional[Any] = None,
        **kwargs
    ):
        context = {
            "resource": resource,
            "resource_id": resource_id,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=True)
        self.resource = resource
        self.resource_id = resource_id


class AuthenticationError(SmartRestaurantsError):
    """Raised when a user-scoped request carries no caller identity."""

    status_code = 401

    def __init__(self, message: str = "No active user", **kwargs):
        super().__init__(message, context=kwargs, recoverable=True)


class ConflictError(SmartRestaurantsError):
    """Raised when a request conflicts with the current state of the store."""

    status_code = 409

    def __init__(self, message: str, **kwargs):
        super().__init__(message, context=kwargs, recoverable=True)


class CapacityExceededError(ConflictError):
    """Raised when every table of a slot is already reserved."""

    def __init__(
        self,
        message: str = "No tables available at this time",
        restaurant_id: Optional[int] = None,
        capacity: Optional[int] = None,
        booked: Optional[int] = None,
        **kwargs
    ):
        super().__init__(
            message,
            restaurant_id=restaurant_id,
            capacity=capacity,
            booked=booked,
            **kwargs
        )
        self.restaurant_id = restaurant_id
        self.capacity = capacity
        self.booked = booked


class DuplicateEntryError(ConflictError):
    """Raised when a favorite or review already exists for the user."""

    def __init__(self, message: str, entity: Optional[str] = None, **kwargs):
        super().__init__(message, entity=entity, **kwargs)
        self.entity = entity


# ============================================================================
# Technical Errors - Database
# ============================================================================

class DatabaseError(SmartRestaurantsError):
    """
    Raised when database operations fail.

    Examples:
    - Connection errors
    - Query failures
    - Transaction errors
    - Unexpected constraint violations
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize database error.

        Args:
            message: Error message
            error_type: Type of error (connection, query, constraint)
            operation: Service operation that failed
            original_error: Original exception
            **kwargs: Additional context
        """
        context = {
            "error_type": error_type,
            "operation": operation,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=False)
        self.error_type = error_type
        self.operation = operation
        self.original_error = original_error


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached."""

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(message=message, error_type="connection", **kwargs)


class DatabaseQueryError(DatabaseError):
    """Raised when a query or transaction fails."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type="query", **kwargs)
