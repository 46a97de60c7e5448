"""HTTP middleware: security headers, body size limit, per-address rate limiting."""

from notekeeper.middleware.rate_limit import RateLimitMiddleware
from notekeeper.middleware.request_size import RequestSizeMiddleware
from notekeeper.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RateLimitMiddleware", "RequestSizeMiddleware", "SecurityHeadersMiddleware"]
