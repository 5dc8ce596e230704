"""Custom exception classes for the course portal.

This module defines application-specific exceptions following Google Python
Style Guide. Managers raise these; routes translate them to HTTP responses.
"""


class CoursePortalError(Exception):
    """Base exception for all course portal errors."""

    pass


class NotFoundError(CoursePortalError):
    """Raised when a resource, request, or user cannot be found."""

    def __init__(self, kind: str, identifier: str):
        """Initialize the exception.

        Args:
            kind: Human-readable resource kind, e.g. "Course".
            identifier: The identifier that was looked up.
        """
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} '{identifier}' not found")


class ValidationError(CoursePortalError):
    """Raised when input data is malformed or violates a field rule."""

    pass


class PermissionDeniedError(CoursePortalError):
    """Raised when the caller lacks the capability for a mutation."""

    pass


class InvariantViolationError(CoursePortalError):
    """Raised when a mutation would break a system invariant."""

    pass


class StoreFailureError(CoursePortalError):
    """Raised when the underlying store fails to persist a change."""

    pass


class ConflictError(CoursePortalError):
    """Raised when a record changed underneath a write (stale version)."""

    pass
