"""
Notebook Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the failure modes a request can hit.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) turn them into JSON error
       responses or redirects.
Who:   Raised by services and auth dependencies; caught by global handlers.

Exception Hierarchy:
    NotebookError (base)
    ├── ValidationError               → 400 Bad Request
    ├── NotFoundError                 → 404 Not Found
    ├── AuthenticationRequiredError   → 302 redirect (login page or home)
    └── DatabaseError                 → 500 Internal Server Error

Form validation failures are NOT exceptions: actions return a submission
with field-level messages so the form can be re-rendered with them.
"""

from typing import Any, Dict, Optional


class NotebookError(Exception):
    """
    Base exception for all Notebook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotebookError):
    """
    Raised when a request is malformed beyond what a form submission reports.

    Example: an unknown `intent` posted to a note route.
    HTTP:    400 Bad Request
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


class NotFoundError(NotebookError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so routes stay free of status-code logic.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AuthenticationRequiredError(NotebookError):
    """
    Raised when a route needs a logged-in user and the request has none.

    HTTP:    302 redirect to `redirect_to`
    Cookie:  When `clear_session` is set the session cookie is expired too,
             which is how a stale or logged-out session gets cleaned up.

    Two flavours exist:
        - No valid session → redirect to /login?redirectTo=<path>
        - Session points at a deleted user → logout, redirect to /
    """

    def __init__(
        self,
        redirect_to: str = "/login",
        clear_session: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["redirect_to"] = redirect_to
        super().__init__(message="Authentication required", context=ctx)
        self.redirect_to = redirect_to
        self.clear_session = clear_session


class DatabaseError(NotebookError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Constraint names,
    SQL and table names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
