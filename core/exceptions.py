"""Custom exception classes for the application.

Domain failures raised by the scaling engine and the acceptance lifecycle
share one hierarchy with the HTTP layer, so a failure raised deep inside a
pure computation is rendered by the same exception handler as a missing
database row.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any, message: Optional[str] = None):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Recipe', 'SafeFood').
            identifier: ID or identifier that was not found.
            message: Optional message replacing the generic one.
        """
        message = message or f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(AppException):
    """Exception raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize validation error.

        Args:
            message: Validation error message.
            field: Optional field name that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class InvalidArgumentError(ValidationError):
    """Raised for non-positive or non-finite numeric input to a computation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, field=field)
        if value is not None:
            self.details["value"] = repr(value)


class DivisionByZeroError(AppException):
    """Raised when a ratio would have to be derived from a zero baseline."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class ConflictError(AppException):
    """Exception raised when a record would duplicate an existing one."""

    def __init__(self, message: str, resource: Optional[str] = None):
        details = {"resource": resource} if resource else {}
        super().__init__(message, status_code=409, details=details)


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize database error.

        Args:
            message: Database error message.
            operation: Optional operation that failed (e.g., 'create', 'update').
            details: Optional extra context.
        """
        details = dict(details or {})
        if operation:
            details["operation"] = operation
        super().__init__(message, status_code=500, details=details)
