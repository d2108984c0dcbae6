"""
InternHub - HTTP Middleware
Request/response logging, timing, context variables and security headers
"""

import time
from typing import Callable, Optional, Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from internhub.core.logging_config import (
    logger,
    set_request_id,
    clear_context,
    set_internship_id,
    generate_request_id,
)


# Paths that skip detailed logging
SKIP_LOGGING_PATHS: Set[str] = {
    "/health",
    "/",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
}

# The certificate preview is shown inside the frontend's iframe
FRAME_EMBEDDABLE_SUFFIXES = ("/certificate-preview",)

# Path segments under /internships/ that are routes, not ids
RESERVED_SEGMENTS = {"dashboard", "my-internships", "my-remarks", "user", "admin", "remarks"}

SLOW_REQUEST_MS = 1000


def should_skip_logging(path: str) -> bool:
    """Check if path should skip detailed logging"""
    return path in SKIP_LOGGING_PATHS or path.startswith("/static/")


def internship_id_from_path(path: str) -> Optional[str]:
    """``/api/v1/internships/<id>/...`` -> ``<id>``"""
    if "/internships/" not in path:
        return None
    segment = path.split("/internships/", 1)[1].split("/")[0]
    if not segment or segment in RESERVED_SEGMENTS:
        return None
    return segment


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    - Generates and tracks request IDs for correlation
    - Sets context variables for downstream logging
    - Adds X-Request-ID and X-Response-Time headers
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        internship_id = internship_id_from_path(path)
        if internship_id:
            set_internship_id(internship_id)

        skip_logging = should_skip_logging(path)
        start_time = time.perf_counter()

        if not skip_logging:
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                f"→ {request.method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": request.method,
                    "http_path": path,
                    "client_ip": client_ip,
                    "user_agent": request.headers.get("user-agent", ""),
                }
            )

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not skip_logging:
                logger.log_request(request.method, path, response.status_code, duration_ms)

                # Certificate rasterization is expected to be slow; still worth a warning
                if duration_ms > SLOW_REQUEST_MS:
                    logger.log_performance(f"{request.method} {path}", duration_ms, SLOW_REQUEST_MS)

            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"✗ {request.method} {path} - Exception ({duration_ms:.2f}ms): {type(exc).__name__}",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": path,
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                    "error_message": str(exc),
                }
            )
            raise

        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        path = request.url.path

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if path.endswith(FRAME_EMBEDDABLE_SUFFIXES):
            response.headers["X-Frame-Options"] = "SAMEORIGIN"
        else:
            response.headers["X-Frame-Options"] = "DENY"

        return response


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "should_skip_logging",
    "internship_id_from_path",
    "SKIP_LOGGING_PATHS",
]
