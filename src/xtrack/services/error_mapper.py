"""Mapping of domain errors to HTTP responses in the standard envelope."""
import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from xtrack.middleware import get_request_id
from xtrack.schemas import ErrorEnvelope
from xtrack.services.exceptions import (ConflictError, ForbiddenError,
                                        InvalidInputError, NotFoundError,
                                        ServiceError, UnauthorizedError)

logger = logging.getLogger(__name__)

_GENERIC_ERROR = "Internal server error"


@dataclass(frozen=True)
class ErrorMapper:
    """Maps service exceptions to HTTP (status_code, message).

    Conflicts are reported as 400 by default, matching the API's published
    contract. Internal failures never expose their message.
    """

    conflict_status: int = 400

    def to_http(self, exc: Exception) -> tuple[int, str]:
        if isinstance(exc, InvalidInputError):
            return (400, exc.message)
        if isinstance(exc, UnauthorizedError):
            return (401, exc.message)
        if isinstance(exc, ForbiddenError):
            return (403, exc.message)
        if isinstance(exc, NotFoundError):
            return (404, exc.message)
        if isinstance(exc, ConflictError):
            return (self.conflict_status, exc.message)
        return (500, _GENERIC_ERROR)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(message=message).model_dump(),
    )


def _validation_message(exc: RequestValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(details)


def register_exception_handlers(app: FastAPI, mapper: ErrorMapper | None = None) -> None:
    """Render every failure as ``{success: false, message}``."""
    mapper = mapper or ErrorMapper()

    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
        status_code, message = mapper.to_http(exc)
        if status_code >= 500:
            logger.error(
                "[%s] %s %s failed: %s",
                get_request_id(request),
                request.method,
                request.url.path,
                exc.message,
            )
        return error_response(status_code, message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "[%s] Unhandled error on %s %s",
            get_request_id(request),
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return error_response(500, _GENERIC_ERROR)
