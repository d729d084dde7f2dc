"""
Pydantic schema definitions for API payloads.

Each domain (DJs, events, contracts, producers, media, users) defines
its own request and response models.  Schemas describe the API shape;
the stored column names differ and are translated by
``services.mappers``.
"""
