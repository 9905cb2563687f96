"""Maps the domain error taxonomy onto HTTP responses.

Body shape for every mapped error: {"error": <class name>, "messages": {...}}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from preparedness.errors import AuthorizationError, ConflictError

logger = structlog.get_logger(__name__)


def _body(exc) -> dict:
    return {"error": type(exc).__name__, "messages": getattr(exc, "messages", {}) or {}}


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Request rejected", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=400, content=_body(exc))


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    logger.warning("Request not allowed", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=403, content=_body(exc))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("Target not found", path=request.url.path)
    return JSONResponse(status_code=404, content=_body(exc))


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    # Losing a race is an expected outcome, not a fault
    logger.info("Request lost to a concurrent change", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=409, content=_body(exc))


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
