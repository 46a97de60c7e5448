"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notekeeper.api import router as api_router
from notekeeper.api.errors import register_exception_handlers
from notekeeper.core.config import DEFAULT_JWT_SECRET, settings
from notekeeper.middleware import (
    RateLimitMiddleware,
    RequestSizeMiddleware,
    SecurityHeadersMiddleware,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

if settings.is_production and settings.JWT_SECRET.get_secret_value() == DEFAULT_JWT_SECRET:
    logger.warning("JWT_SECRET is the built-in default; set a real secret in production.")

app = FastAPI(
    title="Notekeeper API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Added innermost first: the rate limiter and size check run after CORS and headers.
if settings.rate_limiting_active:
    app.add_middleware(
        RateLimitMiddleware,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        general_max=settings.RATE_LIMIT_GENERAL_MAX,
        auth_max=settings.RATE_LIMIT_AUTH_MAX,
    )
app.add_middleware(RequestSizeMiddleware, max_bytes=settings.MAX_BODY_BYTES)
app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.is_production else ["*"],
    allow_credentials=settings.is_production,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Notekeeper API"}


def run() -> None:
    """Serve the app with uvicorn on HOST:PORT."""
    logger.info(
        "Starting Notekeeper on %s:%s (env=%s, rate_limiting=%s)",
        settings.HOST,
        settings.PORT,
        settings.APP_ENV,
        settings.rate_limiting_active,
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
