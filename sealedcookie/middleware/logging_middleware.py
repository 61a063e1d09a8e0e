"""
Request/Response Logging Middleware
Logs all API requests and responses for monitoring and debugging.
Cookie values are sensitive and never logged, only cookie names.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all incoming requests and outgoing responses.
    Includes timing information, status codes and which cookies were exchanged.
    """

    async def dispatch(self, request: Request, call_next):
        # Skip logging for health checks
        if request.url.path in ["/api/health", "/health"]:
            return await call_next(request)

        start_time = time.perf_counter()
        cookie_names = ",".join(sorted(request.cookies)) or "-"
        logger.info(
            f"→ {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'} "
            f"cookies=[{cookie_names}]"
        )

        try:
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            set_cookies = [
                header.split("=", 1)[0]
                for header in response.headers.getlist("set-cookie")
            ]
            logger.info(
                f"← {request.method} {request.url.path} "
                f"[{response.status_code}] "
                f"in {process_time:.3f}s"
                + (f" set-cookie=[{','.join(set_cookies)}]" if set_cookies else "")
            )

            response.headers["X-Process-Time"] = str(process_time)
            return response

        except Exception as e:
            process_time = time.perf_counter() - start_time
            logger.error(
                f"✗ {request.method} {request.url.path} "
                f"failed after {process_time:.3f}s: {type(e).__name__}"
            )
            raise
