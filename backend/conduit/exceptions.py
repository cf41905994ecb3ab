"""
Conduit Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception class carries a message, optional context dict, and the
       HTTP status it maps to. Global exception handlers (registered in main.py)
       catch these and return the error envelope:

           {"errors": {"message": "..."}}             most failures
           {"errors": {"<field>": ["...", "..."]}}    ValidationError

Who:   Raised by services and auth dependencies; caught by global handlers.
When:  During request processing when a domain rule is violated.

Exception Hierarchy:
    ConduitError (base)             → 500 Internal Server Error
    ├── BadRequestError             → 400 Bad Request
    ├── UnauthorizedError           → 401 Unauthorized
    ├── ForbiddenError              → 403 Forbidden
    ├── NotFoundError               → 404 Not Found
    ├── ValidationError             → 422 Unprocessable Entity (field-mapped)
    ├── RateLimitExceededError      → 429 Too Many Requests
    └── DatabaseError               → 500 Internal Server Error

`context` is logged server-side and never returned to the client.
"""

from typing import Any, Dict, List, Optional


class ConduitError(Exception):
    """
    Base exception for all Conduit application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_errors(self) -> Dict[str, Any]:
        """The value placed under the top-level "errors" key of the response."""
        return {"message": self.message}


class BadRequestError(ConduitError):
    """Malformed request that no field rule covers."""

    status_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(ConduitError):
    """
    Raised when the caller is not (or no longer) authenticated.

    What:    Missing Authorization header, bad/expired token, unknown user id,
             or failed login.
    HTTP:    401 Unauthorized

    Token verification failures (bad signature, expired, malformed) all share
    one message; the response never says which check failed.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ConduitError):
    """
    Raised when an authenticated caller acts on something they do not own.

    When:    Updating/deleting another author's article or comment.
    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ConduitError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown article slug, profile username, or comment id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception so routes never deal with it.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ValidationError(ConduitError):
    """
    Raised when input breaks a field rule or a uniqueness rule.

    What:    Maps each offending field to an ordered list of messages.
    When:    Duplicate username/email, self-follow, store-level constraint
             violations. Request-schema failures use the same response shape
             through the RequestValidationError handler.
    HTTP:    422 Unprocessable Entity

    Example response:
        {"errors": {"username": ["has already been taken"]}}
    """

    status_code = 422

    def __init__(
        self,
        errors: Optional[Dict[str, List[str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors or {}
        super().__init__(message="Validation error", context=context)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(errors={field: [message]})

    def to_errors(self) -> Dict[str, Any]:
        return self.errors or {"message": self.message}


class RateLimitExceededError(ConduitError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class DatabaseError(ConduitError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Driver details
    (SQL, constraint names) are logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
