"""Application and access logging for the companion API.

Two rotating files are written under ``LOG_DIR``:

- ``app.log`` receives everything logged below the ``companion`` logger
  (engine, conversations, journal, routers). Records that carry a
  ``conversation_id`` or ``request_id`` attribute (pass them through
  ``extra=``) show it in both the text and the JSON format.
- ``access.log`` receives one JSON line per API request from the
  ``companion.access`` logger.

Request bodies are never read or logged: chat messages and journal entries
are private. Access lines identify the route by its template
(``/api/conversations/{conversation_id}/messages``) and carry the
conversation id as its own field.

Environment variables: LOG_DIR, LOG_LEVEL, LOG_JSON, LOG_RETENTION_DAYS,
LOG_ROTATE_UTC.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from logging.handlers import TimedRotatingFileHandler
from typing import Any, cast
from uuid import uuid4

from fastapi import FastAPI, Request

from .limits import get_client_ip

APP_LOGGER_NAME = "companion"
ACCESS_LOGGER_NAME = "companion.access"

CONTEXT_FIELDS = ("conversation_id", "request_id")
UNLOGGED_PATHS = frozenset({"/api/health", "/api/metrics"})


@dataclass(frozen=True)
class LogSettings:
    log_dir: str = "logs"
    level: int = logging.INFO
    json: bool = False
    retention_days: int = 7
    rotate_utc: bool = False

    def describe(self) -> dict[str, Any]:
        return {
            "log_dir": os.path.abspath(self.log_dir),
            "log_level": logging.getLevelName(self.level),
            "log_json": self.json,
            "retention_days": self.retention_days,
            "rotate_utc": self.rotate_utc,
        }


def load_log_settings() -> LogSettings:
    """Read logging options from the environment."""

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return LogSettings(
        log_dir=os.getenv("LOG_DIR", "logs"),
        level=getattr(logging, level_name, logging.INFO),
        json=os.getenv("LOG_JSON", "false").lower() == "true",
        retention_days=int(os.getenv("LOG_RETENTION_DAYS", "7")),
        rotate_utc=os.getenv("LOG_ROTATE_UTC", "false").lower() == "true",
    )


def _context(record: logging.LogRecord) -> dict[str, str]:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None)
    }


class ContextFormatter(logging.Formatter):
    """Text format with ``key=value`` context appended."""

    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(levelname)s in %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line
        suffix = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {suffix}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, used when LOG_JSON=true."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            "level": record.levelname,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_record.update(_context(record))
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


def _rotating_handler(settings: LogSettings, filename: str) -> TimedRotatingFileHandler:
    return TimedRotatingFileHandler(
        os.path.join(settings.log_dir, filename),
        when="midnight",
        backupCount=settings.retention_days,
        utc=settings.rotate_utc,
    )


def _access_fields(request: Request, status: int, started: float) -> dict[str, Any]:
    route = request.scope.get("route")
    return {
        "request_id": request.state.request_id,
        "method": request.method,
        "route": getattr(route, "path", request.url.path),
        "conversation_id": request.path_params.get("conversation_id"),
        "status": status,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        "client_ip": get_client_ip(request),
        "user_agent": request.headers.get("user-agent"),
    }


def _install_access_logging(app: FastAPI) -> None:
    """Log every API request except health checks and metrics scrapes.

    An incoming ``X-Request-Id`` is reused, otherwise one is generated; it
    is echoed back on the response.
    """

    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        request.state.request_id = request.headers.get("X-Request-Id") or uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-Id"] = request.state.request_id
        fields = _access_fields(request, response.status_code, started)
        access_logger.info(json.dumps(fields, default=str))
        return response


def init_logging(app: FastAPI | None = None, settings: LogSettings | None = None) -> None:
    """Attach rotating file handlers and, given an app, the access middleware.

    The application handler is added once per process; the access handler is
    replaced on every call so a new ``LOG_DIR`` takes effect.
    """

    settings = settings or load_log_settings()
    os.makedirs(settings.log_dir, exist_ok=True)
    formatter = JsonFormatter() if settings.json else ContextFormatter()

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    if not app_logger.handlers:
        handler = _rotating_handler(settings, "app.log")
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)
    app_logger.setLevel(settings.level)

    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    access_logger.handlers.clear()
    handler = _rotating_handler(settings, "access.log")
    handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False

    if app is not None:
        cast(Any, app).logger = app_logger
        _install_access_logging(app)
