import pytest

from backend.app.infra.metrics import InMemoryMetricsClient, get_metrics_client

pytestmark = [pytest.mark.infra]


def test_counters_gauges_and_timings_snapshot() -> None:
    metrics = InMemoryMetricsClient()
    metrics.increment("journal_search_total")
    metrics.increment("journal_search_total", 2)
    metrics.gauge("journal_entries_total", 7)
    metrics.observe("http_request_duration_ms", 10.0)
    metrics.observe("http_request_duration_ms", 30.0)

    snapshot = metrics.snapshot()

    assert snapshot["counters"] == {"journal_search_total": 3}
    assert snapshot["gauges"] == {"journal_entries_total": 7}
    assert snapshot["timings"]["http_request_duration_ms"] == {
        "count": 2,
        "mean": 20.0,
        "max": 30.0,
    }


def test_reset_clears_everything() -> None:
    metrics = InMemoryMetricsClient()
    metrics.increment("a")
    metrics.gauge("b", 1)
    metrics.observe("c", 1.0)

    metrics.reset()

    assert metrics.snapshot() == {"counters": {}, "gauges": {}, "timings": {}}


def test_shared_client_is_a_singleton() -> None:
    assert get_metrics_client() is get_metrics_client()
