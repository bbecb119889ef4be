"""Liveness probe."""

from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> Dict[str, Any]:
    """Report that the service is up, with store and cache figures."""
    service = request.app.state.user_service
    return {
        "status": "ok",
        "users": service.store.count(),
        "cache": service.cache.stats(),
    }
