"""
Top‑level router for version 1 of the API.

The directory routes are mounted without their own prefix; the
application mounts this router under ``settings.api_prefix``.
"""

from fastapi import APIRouter

from .endpoints import directory, categories, health

router = APIRouter()

router.include_router(directory.router, tags=["directory"])
router.include_router(categories.router, tags=["categories"])
router.include_router(health.router, tags=["health"])
