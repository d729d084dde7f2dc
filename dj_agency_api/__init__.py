"""
Top-level package for the DJ Agency API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``dj_agency_api.app.main:app``.
"""

__all__ = []
