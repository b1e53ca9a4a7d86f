"""Error envelope rendering for storage failures and unmatched routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app import main
from backend.app.api.dependencies import get_entry_gateway
from backend.app.config import EntryStoreConfig, LoggingConfig, Settings
from backend.app.domain.journal.errors import JournalStorageError
from backend.app.main import create_app
from tests.helpers.journal import build_client
from tests.helpers.logging import LogCapture

pytestmark = [pytest.mark.journal_api]


class FailingGateway:
    """Gateway whose every call fails like an unreachable database."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def list_entries(self):
        raise self.error

    def get_entry_by_date(self, entry_date):
        raise self.error

    def upsert_entry(self, entry_date, content):
        raise self.error

    def update_entry_content(self, entry_id, content):
        raise self.error

    def delete_entry(self, entry_id):
        raise self.error

    def search_entries(self, query):
        raise self.error

    def get_stats(self):
        raise self.error


@pytest.mark.parametrize(
    ("method", "path", "payload", "message"),
    [
        ("GET", "/api/entries", None, "Failed to fetch journal entries"),
        ("GET", "/api/entries/2024-01-01", None, "Failed to fetch journal entry"),
        (
            "POST",
            "/api/entries",
            {"date": "2024-01-01", "content": "text"},
            "Failed to save journal entry",
        ),
        ("PUT", "/api/entries/abc", {"content": "text"}, "Failed to update journal entry"),
        ("DELETE", "/api/entries/abc", None, "Failed to delete journal entry"),
        ("GET", "/api/search?q=text", None, "Failed to search entries"),
        ("GET", "/api/stats", None, "Failed to fetch statistics"),
    ],
)
def test_storage_failures_render_operation_message(method, path, payload, message):
    client = build_client(FailingGateway(JournalStorageError("database unavailable")))

    response = client.request(method, path, json=payload)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": message}


def test_unexpected_error_renders_generic_message():
    client = build_client(FailingGateway(KeyError("boom")))

    response = client.get("/api/entries")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/api/nope"),
        ("PATCH", "/api/entries"),
        ("DELETE", "/api/entries"),
        ("POST", "/api/stats"),
        ("POST", "/api/entries/2024-01-01"),
        ("PUT", "/api/search"),
    ],
)
def test_unknown_api_route_is_enveloped(method, path):
    client = build_client(FailingGateway(JournalStorageError("unused")))

    response = client.request(method, path)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "API endpoint not found"}


def test_healthz_reports_environment_and_store():
    settings = Settings(
        environment="test",
        entry_store=EntryStoreConfig(backend="memory"),
        logging=LoggingConfig(level="WARNING", format="console"),
    )
    response = TestClient(create_app(settings)).get("/api/healthz")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "environment": "test",
        "entryStore": "memory",
    }


def test_requests_ending_in_unhandled_errors_are_still_logged(monkeypatch):
    captured = LogCapture()
    monkeypatch.setattr(main, "logger", captured)
    settings = Settings(
        environment="test",
        entry_store=EntryStoreConfig(backend="memory"),
        logging=LoggingConfig(level="WARNING", format="console"),
    )
    app = create_app(settings)
    app.dependency_overrides[get_entry_gateway] = lambda: FailingGateway(KeyError("boom"))

    response = TestClient(app, raise_server_exceptions=False).get("/api/entries")

    assert response.status_code == 500
    completed = captured.first("request_completed", level="info")
    completed.assert_extra(method="GET", path="/api/entries", status_code=500)
    assert completed.extra["duration_ms"] >= 0
