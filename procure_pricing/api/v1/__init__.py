# procure_pricing/api/v1/__init__.py
"""
Versioned API v1: aggregates all sub-routers under ``/api/v1``.

Usage in ``main.py``::

    from procure_pricing.api.v1 import v1_router
    app.include_router(v1_router)
"""

from fastapi import APIRouter

from procure_pricing.api.v1.routes.pricing import router as pricing_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(pricing_router)

__all__ = ["v1_router"]
