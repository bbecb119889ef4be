"""
Entry point and legacy endpoints.

``GET /api`` is the discovery document: it links to the collections
and to the documentation, so clients can navigate the API without
hard‑coding paths.  ``GET /api/legacy`` is kept only for old clients
and always announces its retirement.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response

from ...core.versioning import VersionContext
from ...middleware.version_control import get_version_context

router = APIRouter()


@router.get("")
async def api_root(request: Request, version: VersionContext = Depends(get_version_context)) -> Dict[str, Any]:
    """Return links to every top‑level resource."""
    app_settings = request.app.state.settings
    return {
        "_links": {
            "self": {"href": "/api"},
            "users": {"href": "/api/users"},
            "docs": {"href": "/api-docs"},
        },
        "version": app_settings.api_version,
        "requested_version": version.version,
        "description": "RESTful resource API with cursor pagination, caching and header versioning",
    }


@router.get("/legacy", deprecated=True)
async def legacy(request: Request, response: Response) -> Dict[str, str]:
    """Deprecated endpoint; use ``/api/users`` instead."""
    response.headers["Deprecation"] = "true"
    response.headers["Sunset"] = request.app.state.settings.api_sunset
    response.headers["Link"] = '</api/users>; rel="successor-version"'
    return {"message": "This endpoint is deprecated, please use /api/users"}
