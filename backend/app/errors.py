"""Error taxonomy and the handlers that turn every failure into `{"error": ...}`."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging_utils import get_logger

logger = get_logger(__name__)

SERVER_ERROR_MESSAGE = "server error"


class GatewayError(Exception):
    """Base for failures that map onto a client-safe JSON error envelope."""

    status_code = 500
    default_message = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(GatewayError):
    """Caller supplied missing or invalid input."""

    status_code = 400
    default_message = "bad request"


class ServiceUnavailable(GatewayError):
    """Server is missing required configuration."""

    status_code = 503
    default_message = "service unavailable"


class UpstreamError(GatewayError):
    """Upstream provider answered with a non-success status."""

    status_code = 502
    default_message = "upstream error"


class InternalError(GatewayError):
    """Unexpected local or transport failure; details stay in the logs."""

    status_code = 500
    default_message = SERVER_ERROR_MESSAGE


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "request failed"
    return error_response(exc.status_code, message)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else str(first.get("msg"))
    else:
        message = "invalid request"
    return error_response(400, message)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return error_response(500, SERVER_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, _gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
