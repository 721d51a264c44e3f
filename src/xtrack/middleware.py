"""HTTP middleware and logging setup."""
import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
REQUEST_ID_HEADER = "X-Request-ID"


def configure_logging(level: str = "INFO") -> None:
    """Console logging for the service; replaces handlers installed earlier."""
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(level.upper())
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with a short id and log method, path, status and latency."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s %s failed after %.1fms",
                request_id,
                request.method,
                request.url.path,
                (time.perf_counter() - start_time) * 1000,
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "[%s] %s %s -> %d (%.1fms)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start_time) * 1000,
        )
        return response


def get_request_id(request: Request) -> str:
    """Request id assigned by RequestLoggingMiddleware, or 'unknown'."""
    return getattr(request.state, "request_id", "unknown")
