import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest
from starlette.testclient import TestClient

from companion.app_logging import (
    ACCESS_LOGGER_NAME,
    APP_LOGGER_NAME,
    init_logging,
    load_log_settings,
)


def _clear_handlers(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.handlers.clear()
    return logger


def _flush(name: str) -> None:
    for handler in logging.getLogger(name).handlers:
        handler.flush()


@pytest.fixture
def log_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    _clear_handlers(APP_LOGGER_NAME)
    _clear_handlers(ACCESS_LOGGER_NAME)
    yield tmp_path
    _clear_handlers(APP_LOGGER_NAME)
    _clear_handlers(ACCESS_LOGGER_NAME)


def test_timed_rotating_handler_configuration(log_dir, monkeypatch):
    monkeypatch.setenv("LOG_RETENTION_DAYS", "5")
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    stale = logging.StreamHandler()
    access_logger.addHandler(stale)

    init_logging()

    (app_handler,) = logging.getLogger(APP_LOGGER_NAME).handlers
    assert isinstance(app_handler, TimedRotatingFileHandler)
    assert app_handler.when == "MIDNIGHT"
    assert app_handler.backupCount == 5

    (access_handler,) = access_logger.handlers
    assert isinstance(access_handler, TimedRotatingFileHandler)
    assert access_handler.backupCount == 5
    assert stale not in access_logger.handlers
    assert access_logger.propagate is False


def test_conversation_id_is_appended_to_text_lines(log_dir):
    init_logging()

    logging.getLogger("companion.conversations.escalation").warning(
        "escalation raised", extra={"conversation_id": "c1"}
    )
    _flush(APP_LOGGER_NAME)

    line = (log_dir / "app.log").read_text().splitlines()[-1]
    assert "WARNING in companion.conversations.escalation: escalation raised" in line
    assert line.endswith("conversation_id=c1")


def test_json_lines_carry_context_fields(log_dir, monkeypatch):
    monkeypatch.setenv("LOG_JSON", "true")
    init_logging()

    logging.getLogger("companion.conversations.service").info(
        "conversation created", extra={"conversation_id": "c2"}
    )
    _flush(APP_LOGGER_NAME)

    record = json.loads((log_dir / "app.log").read_text().splitlines()[-1])
    assert record["logger"] == "companion.conversations.service"
    assert record["message"] == "conversation created"
    assert record["conversation_id"] == "c2"
    assert "request_id" not in record


def test_access_log_names_route_and_omits_user_text(log_dir, app_factory):
    app = app_factory(log_dir)

    with TestClient(app) as client:
        resp = client.post(
            "/api/conversations/c42/messages",
            json={"text": "I want to die"},
            headers={"X-Request-Id": "req-1", "X-Forwarded-For": "10.9.9.9"},
        )
        assert resp.status_code == 200
        assert resp.headers["X-Request-Id"] == "req-1"
        assert client.get("/api/health").status_code == 200
    _flush(ACCESS_LOGGER_NAME)

    lines = (log_dir / "access.log").read_text().splitlines()
    assert len(lines) == 1
    data = json.loads(lines[0])
    assert data["request_id"] == "req-1"
    assert data["method"] == "POST"
    assert data["route"] == "/api/conversations/{conversation_id}/messages"
    assert data["conversation_id"] == "c42"
    assert data["status"] == 200
    assert data["client_ip"] == "10.9.9.9"
    assert "want to die" not in lines[0]


def test_log_settings_describe(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_ROTATE_UTC", "true")

    described = load_log_settings().describe()
    assert described["log_dir"] == str(tmp_path)
    assert described["log_level"] == "DEBUG"
    assert described["rotate_utc"] is True
    assert described["log_json"] is False
