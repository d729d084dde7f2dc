"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import (
    audit,
    contracts,
    djs,
    events,
    financials,
    media,
    producers,
    users,
)

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(producers.router, prefix="/producers", tags=["producers"])
router.include_router(djs.router, prefix="/djs", tags=["djs"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(financials.router, prefix="/financials", tags=["financials"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
