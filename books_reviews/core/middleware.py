# In books_reviews/core/middleware.py
import time
import uuid
import logging

from typing import Optional, Set
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from books_reviews.core.config import settings

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds a request ID to every request and logs structured information
    about the request and its response.
    """

    def __init__(self, app, exclude_paths: Optional[Set[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or {"/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        should_log = request.url.path not in self.exclude_paths

        if should_log:
            logger.info(
                "Incoming request",
                extra={
                    "request_id": request_id,
                    "client_ip": self._get_client_ip(request),
                    "method": request.method,
                    "path": request.url.path,
                    "query_params": (
                        str(request.query_params) if request.query_params else None
                    ),
                },
            )

        # Exceptions raised here are rendered by the registered exception handlers.
        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id

        if should_log:
            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "process_time_ms": round(process_time, 2),
                },
            )

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP considering proxy headers"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"


def register_middlewares(app: FastAPI):
    """
    Registers all middlewares for the FastAPI application.
    Middlewares execute in reverse order of registration.
    """
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Registered last so it wraps everything else
    app.add_middleware(
        RequestLoggingMiddleware, exclude_paths=settings.LOGGING_EXCLUDE_PATHS
    )

    logger.info("All middlewares registered successfully")


def _get_cors_origins() -> list[str]:
    """Validate and return CORS origins configuration"""
    origins = [
        origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()
    ]

    if not origins:
        logger.warning("CORS_ORIGINS is empty after parsing, using restrictive default")
        return ["http://localhost:3000", "http://localhost:8000"]

    return origins
