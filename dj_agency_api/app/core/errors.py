"""
Exceptions raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request.  ``api.v1.errors.service_errors`` maps them to
status codes: ``NotFoundError`` to 404, ``InvalidReferenceError`` to
400 and ``AccessDeniedError`` to 403.
"""


class NotFoundError(ValueError):
    """A requested record does not exist."""


class InvalidReferenceError(ValueError):
    """A payload references a missing record or an invalid state change."""


class AccessDeniedError(PermissionError):
    """The current user may not see or change the record."""
