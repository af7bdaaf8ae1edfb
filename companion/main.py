"""FastAPI application wiring for Wellness Companion.

This module bootstraps the HTTP API:

- Configures logging, CORS (optional for the web client), Prometheus metrics
  and rate limiting.
- Exposes health/version/config endpoints and mounts the conversation and
  journal routers.

Chat replies come from the keyword-driven response engine in
``companion.engine``; no language model is involved.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .__version__ import __build_date__, __commit_sha__, __version__
from .app_logging import init_logging
from .config import get_settings
from .limits import limiter
from .routers import conversations, journal

load_dotenv()

logger = logging.getLogger("companion.main")

app = FastAPI(title="Wellness Companion", version=__version__)
init_logging(app)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
# Optional CORS for the web client
client_origins = os.getenv("ADMIN_UI_ORIGINS")
if client_origins:
    origins = [o.strip() for o in client_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.include_router(conversations.router)
app.include_router(journal.router)
logger.info(
    "Wellness Companion %s ready (keyword match mode: %s)",
    __version__,
    get_settings().match_mode,
)

# Expose Prometheus metrics
Instrumentator().instrument(app).expose(
    app, include_in_schema=False, endpoint="/api/metrics"
)


@app.get("/api/health")
async def health():
    """Liveness/readiness check with a minimal JSON body."""
    return {"status": "ok"}


@app.get("/api/version")
async def version():
    """Return version information for the application."""
    return {
        "version": __version__,
        "build_date": __build_date__,
        "commit_sha": __commit_sha__,
    }


@app.get("/api/config")
async def config():
    """Expose selected frontend configuration."""
    settings = get_settings()
    return {
        "BRAND_NAME": settings.brand_name,
        "CHAT_MAX_MESSAGE_LENGTH": settings.chat_max_message_length,
        "RESPONSE_MIN_DELAY_MS": int(settings.min_delay_seconds * 1000),
        "RESPONSE_MAX_DELAY_MS": int(settings.max_delay_seconds * 1000),
        "KEYWORD_MATCH_MODE": settings.match_mode,
    }
