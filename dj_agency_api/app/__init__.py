"""
Application package initializer.

The application is split by layer: ``core`` (configuration, database,
security, access control), ``schemas`` (pydantic models), ``services``
(business logic) and ``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
