"""FastAPI tests for search and statistics endpoints."""

from __future__ import annotations

import pytest

from backend.app.domain.journal.gateway import InMemoryJournalEntryGateway
from tests.helpers.journal import build_client, build_sql_gateway

pytestmark = [pytest.mark.journal_api]


@pytest.fixture(params=["memory", "sql"])
def gateway(request):
    if request.param == "memory":
        return InMemoryJournalEntryGateway()
    return build_sql_gateway()


@pytest.fixture()
def client(gateway):
    return build_client(gateway)


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(client, params):
    response = client.get("/api/search", params=params)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Search query is required"}


def test_search_returns_matches_with_count(client, gateway):
    gateway.upsert_entry("2024-01-01", "Walked by the River")
    gateway.upsert_entry("2024-01-02", "stayed home")
    gateway.upsert_entry("2024-01-03", "river again")

    response = client.get("/api/search", params={"q": "RIVER"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [item["date"] for item in body["data"]] == ["2024-01-03", "2024-01-01"]


def test_search_without_matches(client, gateway):
    gateway.upsert_entry("2024-01-01", "nothing to see")

    response = client.get("/api/search", params={"q": "zebra"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": [], "count": 0}


def test_stats_empty_store(client):
    response = client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "totalEntries": 0,
            "avgWordsPerEntry": 0,
            "firstEntryDate": None,
            "lastEntryDate": None,
            "totalWords": 0,
        },
    }


def test_stats_reports_words_and_range(client, gateway):
    gateway.upsert_entry("2024-01-01", "a b")
    gateway.upsert_entry("2024-03-01", "c d e")

    response = client.get("/api/stats")

    assert response.json()["data"] == {
        "totalEntries": 2,
        "avgWordsPerEntry": 3,
        "firstEntryDate": "2024-01-01",
        "lastEntryDate": "2024-03-01",
        "totalWords": 5,
    }
