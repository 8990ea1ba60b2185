import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and tag the response with a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            duration = time.monotonic() - start
            logger.error(
                "%s %s failed after %.2fms [%s]",
                request.method,
                request.url.path,
                duration * 1000,
                request_id,
            )
            raise

        duration = time.monotonic() - start
        logger.info(
            "%s %s -> %d in %.2fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            duration * 1000,
            request_id,
        )

        response.headers["X-Request-ID"] = request_id
        return response
