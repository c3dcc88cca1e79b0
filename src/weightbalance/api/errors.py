"""Exception handlers rendering every failure as ``{"message": ..., "error"?: ...}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weightbalance.api.auth_config import is_dev_mode
from weightbalance.errors import InternalError, RecordError, ValidationError

logger = logging.getLogger(__name__)


def _body(message: str, error: str | None = None) -> dict:
    body = {"message": message}
    if error:
        body["error"] = error
    return body


def _iter_routes(routes):
    """Yield leaf routes, descending into included routers."""
    for route in routes:
        included = getattr(route, "original_router", None)
        if included is not None:
            yield from _iter_routes(included.routes)
        else:
            yield route


def allowed_methods(app: FastAPI, request: Request) -> list[str]:
    """Every method registered for the request path, across all matching routes."""
    path = request.url.path
    methods: set[str] = set()
    for route in _iter_routes(app.router.routes):
        path_regex = getattr(route, "path_regex", None)
        if path_regex is not None and path_regex.match(path):
            methods.update(getattr(route, "methods", None) or ())
    methods.discard("HEAD")
    return sorted(methods)


async def record_error_handler(request: Request, exc: RecordError) -> JSONResponse:
    error = None
    if isinstance(exc, ValidationError):
        error = exc.problem
    elif isinstance(exc, InternalError) and is_dev_mode():
        error = exc.detail or None
    return JSONResponse(status_code=exc.status_code, content=_body(exc.message, error))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("loc", ("",))[0] == "path" for err in errors):
        message = "Invalid or missing ID."
    else:
        message = "Request body must be a JSON object."
    return JSONResponse(status_code=400, content=_body(message, "invalid_request"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = dict(exc.headers or {})
    if exc.status_code == 405:
        methods = allowed_methods(request.app, request)
        if methods:
            headers["Allow"] = ", ".join(methods)
        message = f"Method {request.method} Not Allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_body(message), headers=headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = str(exc) if is_dev_mode() else None
    return JSONResponse(status_code=500, content=_body("Internal Server Error", error))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordError, record_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
