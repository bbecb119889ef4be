"""Error handling for the FastAPI application.

Converts the core's typed errors, request validation failures and
unexpected exceptions into the ``ApiError`` JSON body
(``{"error", "message", "details"}``).
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import ResourceAPIError


logger = logging.getLogger(__name__)


def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    formatted = []
    for error in errors:
        field = ".".join(str(loc) for loc in error.get("loc", ()))
        formatted.append({"field": field, "message": error.get("msg", "")})
    return formatted


def setup_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register exception handlers on ``app``.

    Args:
        app: The FastAPI application instance to configure
        debug: Expose the message of unexpected exceptions in responses
    """

    @app.exception_handler(ResourceAPIError)
    async def handle_resource_error(request: Request, exc: ResourceAPIError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.error, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation Error",
                "message": "Request validation failed",
                "details": _format_validation_errors(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
        # Internal details are only exposed when running in debug mode.
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": str(exc) if debug else "Something went wrong",
            },
        )
