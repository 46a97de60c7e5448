"""Reject requests whose Content-Length exceeds the configured body limit."""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestSizeMiddleware(BaseHTTPMiddleware):
    """Checks Content-Length before the body is read."""

    def __init__(self, app, max_bytes: int) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                length = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"message": "Invalid Content-Length header"},
                )
            if length > self.max_bytes:
                logger.warning(
                    "Request too large: %s bytes on %s (limit %s)",
                    length,
                    request.url.path,
                    self.max_bytes,
                )
                return JSONResponse(
                    status_code=413,
                    content={"message": "Request body too large"},
                )

        return await call_next(request)
