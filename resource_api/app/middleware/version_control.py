"""API version negotiation middleware.

Every request passes the ``VersionGate`` before reaching a route.  An
unsupported ``api-version`` header ends the exchange with a 400 listing
the supported versions; accepted requests get their ``VersionContext``
stored on ``request.state`` and the matching headers (including the
deprecation notice for the oldest version) added to the response.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import VersionUnsupported
from ..core.versioning import VERSION_HEADER, VersionContext, VersionGate


def setup_version_control(app: FastAPI, gate: VersionGate) -> None:
    app.state.version_gate = gate

    @app.middleware("http")
    async def version_control(request: Request, call_next):
        try:
            context = gate.resolve(request.headers.get(VERSION_HEADER))
        except VersionUnsupported as exc:
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        request.state.api_version = context
        response = await call_next(request)
        response.headers[VERSION_HEADER] = context.version
        # Routes that announce their own deprecation keep their headers.
        for name, value in context.response_headers().items():
            response.headers.setdefault(name, value)
        return response


def get_version_context(request: Request) -> VersionContext:
    """Dependency returning the version resolved for the current request."""
    context = getattr(request.state, "api_version", None)
    if context is None:
        gate: VersionGate = getattr(request.app.state, "version_gate", None) or VersionGate()
        context = gate.resolve(request.headers.get(VERSION_HEADER))
    return context
