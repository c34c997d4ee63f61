import logging
from typing import Iterable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from recipeshare.core.config import settings

logger = logging.getLogger(__name__)


class OriginAllowlistMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests whose Origin header is not on the allowlist.
    Requests without an Origin (curl, server-to-server, local tooling) pass.
    CORSMiddleware still supplies the response headers for allowed origins.
    """

    def __init__(self, app, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins if origin}

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is None:
            return await call_next(request)

        if settings.ENVIRONMENT != "production":
            logger.debug(f"CORS origin: {origin}")

        if origin.rstrip("/") not in self.allowed_origins:
            logger.warning(f"Rejected request from origin {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "Not allowed by CORS"},
            )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.ENVIRONMENT in ["development", "testing"]:
            # Relaxed to allow FastAPI Swagger UI assets
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "img-src 'self' data: https://fastapi.tiangolo.com; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            )
        else:
            response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response
