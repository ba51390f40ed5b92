"""
Courseware Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every failure the resource layer reports.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn the server-side
       ones into structured JSON error responses with the right HTTP status.
Who:   Raised by services and the client; caught by global handlers or callers.

Exception Hierarchy:
    CoursewareError (base)
    ├── NotFoundError     → 404 Not Found (missing id, or an empty listing)
    ├── StorageError      → 500 Internal Server Error (persistence failed)
    │   └── ValidationError → 500 (payload not assignable to the schema)
    └── TransportError    → client side only (request/network/status failure)
"""

from typing import Any, Dict, Optional


class CoursewareError(Exception):
    """
    Base exception for all Courseware application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(CoursewareError):
    """
    Raised when a lookup has nothing to return.

    Two cases share this type: a point lookup for an identifier the store
    never assigned, and a listing that came back empty. The message is the
    resource definition's wording ("Course not found" / "No courses").
    """

    def __init__(
        self,
        message: str,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StorageError(CoursewareError):
    """
    Raised when the storage collaborator fails.

    Covers connectivity loss, timeouts, rejected writes and identifiers the
    store cannot parse. The message carries the underlying failure text;
    `context["error_type"]` names the original exception class.
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransportError(CoursewareError):
    """
    Raised by ResourceClient when a remote call does not succeed.

    Attributes:
        status_code: HTTP status of the response, or None when no response arrived
        details:     Decoded error body from the server, if any

    The original httpx exception is chained as `__cause__`.
    """

    def __init__(
        self,
        message: str = "Request to the resource API failed",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.details = details or {}


class ValidationError(StorageError):
    """
    Raised when a payload cannot be coerced to the resource definition.

    Only types are checked; there are no required fields and unknown fields
    are accepted, so this fires for values like `{"rating": "five"}` or a
    body that is not an object. The storage layer would refuse such a
    document, so it is reported on the same 500 path as other storage errors.

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid course payload: rating: Input should be a valid number",
            "details": {"errors": [...]}
        }
    """
