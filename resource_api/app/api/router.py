"""
Top‑level API router.

Aggregates the domain routers under ``/api``.  The API is versioned by
header, so there is no version segment in the paths.  Register new
domains here.
"""

from fastapi import APIRouter

from .endpoints import health, root, users

router = APIRouter()

router.include_router(root.router, prefix="/api", tags=["root"])
router.include_router(users.router, prefix="/api/users", tags=["users"])
router.include_router(health.router, tags=["health"])
