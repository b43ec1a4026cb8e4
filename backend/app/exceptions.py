"""
Blog Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return the `{status: "error", message, error?}` envelope with the
       status code declared on the class.
Who:   Raised by services, payload parsing, and middleware.

Exception Hierarchy:
    BlogError (base)
    ├── ValidationError        → 400 Bad Request
    ├── NotFoundError          → 404 Not Found
    ├── ConflictError          → 400 Bad Request (duplicate unique value)
    ├── PayloadTooLargeError   → 413 Payload Too Large
    └── DatabaseError          → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      User-facing error description (safe to return)
        context:      Additional debug info (logged; returned only in diagnostic mode)
        status_code:  HTTP status the global handler responds with
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogError):
    """
    Raised when client input is malformed or a required field is missing.

    When:  Non-numeric article ID, missing title/content, empty update body,
           unparseable publish_date, request body that is not JSON/form data.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogError):
    """
    Raised when a requested row does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so the handler can answer 404.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(BlogError):
    """
    Raised when an insert would duplicate a unique value (category name).

    Answered with 400 rather than 409; existing API clients branch on 400.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PayloadTooLargeError(BlogError):
    """Raised when a request body exceeds the configured ceiling."""

    status_code = 413

    def __init__(self, limit: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["limit"] = limit
        super().__init__(
            message=f"Request body exceeds the maximum size of {limit} bytes",
            context=ctx,
        )
        self.limit = limit


class DatabaseError(BlogError):
    """
    Raised when a database operation fails.

    `message` names the operation that failed and is always returned.
    The driver's own message is kept in context["detail"]; it reaches the
    client only in diagnostic mode.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

    @property
    def detail(self) -> str:
        return str(self.context.get("detail", self.message))
