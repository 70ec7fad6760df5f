"""
HTTP middleware.

- cors_middleware: fixed permissive CORS headers; answers preflight requests itself.
- request_context_middleware: request id, access logging and the terminal 500 handler.
- http_exception_handler / validation_exception_handler: render errors as {"error": ...}.
"""
from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging import bind_context

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, HEAD",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept, Authorization, Cache-Control",
    "Access-Control-Max-Age": "3600",
}

INTERNAL_ERROR_BODY = {"error": "Something went wrong!"}


async def cors_middleware(request: Request, call_next) -> Response:
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


async def request_context_middleware(request: Request, call_next) -> Response:
    """Tag the request with an id, log its outcome and turn uncaught errors into a 500."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start_time = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start_time) * 1000
        with bind_context(logger, request_id=request_id, path=request.url.path, method=request.method, duration_ms=round(duration_ms, 2)) as log:
            log.exception("unhandled_exception")
        response = JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)
    else:
        duration_ms = (time.perf_counter() - start_time) * 1000
        with bind_context(logger, request_id=request_id, path=request.url.path, method=request.method, status_code=response.status_code, duration_ms=round(duration_ms, 2)) as log:
            log.info("request_complete")

    response.headers["X-Request-ID"] = request_id
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": "Validation Error", "details": jsonable_encoder(exc.errors())})
