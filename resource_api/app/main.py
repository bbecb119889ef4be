"""
Main entrypoint for the Resource API.

This module assembles the FastAPI application: logging, the
application‑owned store and cache, middleware (CORS, compression,
security headers, rate limiting, version negotiation), error handlers
and routes.  ``create_app`` builds and configures the app, which is
then instantiated at module import time as ``app``, e.g.::

    uvicorn resource_api.app.main:app --reload

Interactive documentation is served at ``/api-docs``.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .api.router import router as api_router
from .core.cache import TTLCache
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .core.versioning import VersionGate
from .middleware.error_handler import setup_error_handlers
from .middleware.rate_limit import setup_rate_limit
from .middleware.security_headers import SecurityHeadersMiddleware
from .middleware.version_control import setup_version_control
from .services.user_service import UserService, new_user_store


logger = logging.getLogger(__name__)

DESCRIPTION = """
Example API following RESTful design guidelines.

* Bearer (JWT) authentication for writes
* Cursor pagination with field selection
* HATEOAS links
* Versioning through the `api-version` header
* Response caching, compression, rate limiting and security headers
"""


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Every application owns its own user store and TTL cache; nothing
    is shared between two instances.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use; defaults to the environment‑derived
        ``core.config.settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        description=DESCRIPTION,
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        redoc_url=None,
    )
    app.state.settings = app_settings

    cache = TTLCache(
        default_ttl=app_settings.cache_ttl_seconds,
        check_period=app_settings.sweep_interval,
    )
    app.state.user_service = UserService(
        store=new_user_store(),
        cache=cache,
        default_page_size=app_settings.default_page_size,
        max_page_size=app_settings.max_page_size,
    )

    # Middleware added first runs innermost: the version gate sees the
    # request last and stamps its headers before the outer layers.
    setup_version_control(app, VersionGate.from_settings(app_settings))
    setup_rate_limit(app, app_settings.rate_limit, enabled=app_settings.rate_limit_enabled)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["api-version", "Deprecation", "Sunset", "Link", "Location"],
    )

    setup_error_handlers(app, debug=app_settings.debug)
    app.include_router(api_router)

    @app.on_event("startup")
    async def startup_event() -> None:
        cache.start()
        logger.info("%s %s started", app_settings.project_name, app_settings.api_version)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        cache.close()
        logger.info("%s stopped", app_settings.project_name)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
