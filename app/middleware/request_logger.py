# app/middleware/request_logger.py
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app.requests")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        # Only log POST, PATCH, PUT, DELETE (modify) requests
        if request.method in ("POST", "PATCH", "PUT", "DELETE"):
            elapsed_ms = (time.perf_counter() - started) * 1000
            level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                level,
                "%s %s -> %s (%.1f ms)",
                request.method, request.url.path, response.status_code, elapsed_ms,
            )

        return response
