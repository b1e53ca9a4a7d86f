"""Full-text search over journal entry content."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_entry_gateway
from ...domain.journal.errors import JournalStorageError, JournalValidationError
from ...domain.journal.gateway import JournalEntryGateway
from ...infra.logging import get_logger
from ...infra.metrics import get_metrics_client
from ..envelope import ApiError, EntryListEnvelope, serialize_entry, storage_failure

router = APIRouter(prefix="/api", tags=["search"])
logger = get_logger(__name__)
metrics = get_metrics_client()


@router.get(
    "/search",
    response_model=EntryListEnvelope,
    response_model_exclude_unset=True,
    summary="Case-insensitive substring search, newest first",
)
def search_entries(
    q: Optional[str] = Query(default=None, description="Text to look for."),
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> EntryListEnvelope:
    if q is None or not q.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Search query is required")

    try:
        entries = entry_gateway.search_entries(q)
    except JournalValidationError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Search query is required") from exc
    except JournalStorageError as exc:
        raise storage_failure("search_entries", "Failed to search entries") from exc

    metrics.increment("journal_search_total")
    logger.info("journal_search", extra={"matches": len(entries)})
    return EntryListEnvelope(
        success=True,
        data=[serialize_entry(entry) for entry in entries],
        count=len(entries),
    )
