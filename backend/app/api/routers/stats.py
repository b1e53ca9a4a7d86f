"""Aggregate journal statistics."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...api.dependencies import get_entry_gateway
from ...domain.journal.errors import JournalStorageError
from ...domain.journal.gateway import JournalEntryGateway
from ...infra.metrics import get_metrics_client
from ..envelope import StatsEnvelope, serialize_stats, storage_failure

router = APIRouter(prefix="/api", tags=["stats"])
metrics = get_metrics_client()


@router.get(
    "/stats",
    response_model=StatsEnvelope,
    response_model_exclude_unset=True,
    summary="Entry count, word totals and date range",
)
def get_stats(
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> StatsEnvelope:
    try:
        stats = entry_gateway.get_stats()
    except JournalStorageError as exc:
        raise storage_failure("get_stats", "Failed to fetch statistics") from exc
    metrics.gauge("journal_entries_total", stats.total_entries)
    return StatsEnvelope(success=True, data=serialize_stats(stats))
