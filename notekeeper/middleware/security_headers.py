"""
Security headers added to every response.

- X-Content-Type-Options: prevents MIME sniffing
- X-Frame-Options: prevents clickjacking
- Content-Security-Policy: API responses load nothing
- Referrer-Policy: do not leak URLs cross-origin
- Strict-Transport-Security: production only
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

DEFAULT_CSP = "default-src 'none'; frame-ancestors 'none'"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all responses."""

    def __init__(self, app, enable_hsts: bool = False) -> None:
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = DEFAULT_CSP
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        if self.enable_hsts:
            # 180 days
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        return response
