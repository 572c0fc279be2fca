"""
Tutorial API - Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by the service layer, the body parser and the lifespan.

Exception Hierarchy:
    TutorialAPIError (base)          → 500 Internal Server Error
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── NotFoundError                → 404 Not Found
    ├── DatabaseError                → 500 Internal Server Error
    └── DatabaseConnectionError      → fatal at startup (never reaches a client)
"""

from typing import Any, Dict, Optional


class TutorialAPIError(Exception):
    """
    Base exception for all Tutorial API errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TutorialAPIError):
    """
    Raised when client input fails validation.

    When:    Missing or blank title, empty update body, unparseable body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Content can not be empty!",
            "details": {"field": "title"}
        }
    """

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


class NotFoundError(TutorialAPIError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /tutorials/{id} with an id that matches no document.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with id '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TutorialAPIError):
    """
    Raised when a MongoDB operation fails unexpectedly.

    What:    A query, insert, update or delete raised a driver error.
    HTTP:    500 Internal Server Error

    The message returned to the client is the driver's error text, falling
    back to a per-operation description when the driver gives none.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseConnectionError(TutorialAPIError):
    """
    Raised when the database cannot be reached during startup.

    The lifespan lets it propagate, which aborts application startup and
    terminates the server process. There is no retry.
    """

    def __init__(
        self,
        message: str = "Cannot connect to the database!",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
