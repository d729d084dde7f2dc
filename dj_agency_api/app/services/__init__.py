"""
Service layer.

Each service encapsulates the business logic for one domain (DJs,
events, contracts, producers, media, users, financials, audit).
Services talk to SQLite through ``core.db``, apply the visibility
rules of ``core.access_control`` and raise the exceptions from
``core.errors``; API handlers translate those into HTTP responses.
"""
