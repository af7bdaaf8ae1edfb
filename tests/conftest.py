import pathlib
import sys

import pytest
from fastapi import FastAPI, Request

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from companion.app_logging import init_logging
from companion.config import EngineSettings
from companion.conversations import ConversationService
from companion.journal import JournalService


def _parse_events(resp):
    """Collect ``(event, data)`` pairs from an SSE response."""
    events = []
    current = None
    for line in resp.iter_lines():
        if not line:
            continue
        if isinstance(line, bytes):
            line = line.decode()
        if line.startswith("event:"):
            current = line.split(":", 1)[1].strip()
        elif line.startswith("data:") and current:
            events.append((current, line.split(":", 1)[1].strip()))
            current = None
    return events


@pytest.fixture
def parse_events():
    return _parse_events


@pytest.fixture
def instant_settings() -> EngineSettings:
    return EngineSettings(min_delay_seconds=0, max_delay_seconds=0)


@pytest.fixture
def api_client(monkeypatch, tmp_path, instant_settings):
    """TestClient with zero reply delay and fresh in-memory services."""
    from fastapi.testclient import TestClient

    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    from companion.main import app
    from companion.routers import conversations, journal

    conversation_service = ConversationService(instant_settings)
    journal_service = JournalService()
    app.dependency_overrides[conversations.get_conversation_service] = (
        lambda: conversation_service
    )
    app.dependency_overrides[journal.get_journal_service] = lambda: journal_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def app_factory(monkeypatch):
    def _create_app(log_dir: str):
        """Create a FastAPI app with logging initialised."""
        monkeypatch.setenv("LOG_DIR", str(log_dir))
        app = FastAPI()

        @app.post("/api/conversations/{conversation_id}/messages")
        async def echo(conversation_id: str, request: Request):
            return await request.json()

        @app.get("/api/health")
        async def health():
            return {"status": "ok"}

        init_logging(app)
        return app

    return _create_app
