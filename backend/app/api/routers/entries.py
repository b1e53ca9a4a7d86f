"""Journal entry endpoints: list, fetch by date, save, update, delete."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from ...api.dependencies import get_entry_gateway
from ...domain.journal.errors import (
    JournalEntryNotFoundError,
    JournalStorageError,
    JournalValidationError,
)
from ...domain.journal.gateway import JournalEntryGateway
from ...infra.logging import get_logger
from ...infra.metrics import get_metrics_client
from ..envelope import (
    ApiError,
    EntryEnvelope,
    EntryListEnvelope,
    MessageEnvelope,
    serialize_entry,
    storage_failure,
)

router = APIRouter(prefix="/api/entries", tags=["entries"])
logger = get_logger(__name__)
metrics = get_metrics_client()


class SaveEntryRequest(BaseModel):
    date: Optional[str] = None
    content: Optional[str] = None


class UpdateEntryRequest(BaseModel):
    content: Optional[str] = None


@router.get(
    "",
    response_model=EntryListEnvelope,
    response_model_exclude_unset=True,
    summary="List all journal entries, newest first",
)
def list_entries(
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> EntryListEnvelope:
    try:
        entries = entry_gateway.list_entries()
    except JournalStorageError as exc:
        raise storage_failure("list_entries", "Failed to fetch journal entries") from exc
    return EntryListEnvelope(
        success=True, data=[serialize_entry(entry) for entry in entries]
    )


@router.get(
    "/{entry_date}",
    response_model=EntryEnvelope,
    response_model_exclude_unset=True,
    summary="Retrieve the entry written for a date",
)
def get_entry_by_date(
    entry_date: str,
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> EntryEnvelope:
    try:
        entry = entry_gateway.get_entry_by_date(entry_date)
    except JournalEntryNotFoundError as exc:
        raise ApiError(status.HTTP_404_NOT_FOUND, "No entry found for this date") from exc
    except JournalStorageError as exc:
        raise storage_failure("get_entry_by_date", "Failed to fetch journal entry") from exc
    return EntryEnvelope(success=True, data=serialize_entry(entry))


@router.post(
    "",
    response_model=EntryEnvelope,
    response_model_exclude_unset=True,
    summary="Create the entry for a date, or replace its content",
)
def save_entry(
    payload: SaveEntryRequest,
    response: Response,
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> EntryEnvelope:
    if not payload.date or not payload.content:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Date and content are required")
    if not payload.content.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Content cannot be empty")

    try:
        result = entry_gateway.upsert_entry(payload.date, payload.content)
    except JournalValidationError as exc:
        logger.info(
            "journal_entry_rejected",
            extra={"field": exc.field, "reason": str(exc)},
        )
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid data provided") from exc
    except JournalStorageError as exc:
        raise storage_failure("upsert_entry", "Failed to save journal entry") from exc

    entry = result.entry
    metrics.increment(f"journal_entry_{result.outcome.value}_total")
    logger.info(
        "journal_entry_saved",
        extra={
            "entry_id": entry.entry_id,
            "entry_date": entry.entry_date,
            "outcome": result.outcome.value,
        },
    )
    if result.created:
        response.status_code = status.HTTP_201_CREATED
        message = "Journal entry created successfully"
    else:
        message = "Journal entry updated successfully"
    return EntryEnvelope(success=True, message=message, data=serialize_entry(entry))


@router.put(
    "/{entry_id}",
    response_model=EntryEnvelope,
    response_model_exclude_unset=True,
    summary="Replace the content of an entry by id",
)
def update_entry(
    entry_id: str,
    payload: UpdateEntryRequest,
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> EntryEnvelope:
    if not payload.content or not payload.content.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Content is required")

    try:
        entry = entry_gateway.update_entry_content(entry_id, payload.content)
    except JournalEntryNotFoundError as exc:
        raise _entry_not_found(entry_id) from exc
    except JournalValidationError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Content is required") from exc
    except JournalStorageError as exc:
        raise storage_failure("update_entry_content", "Failed to update journal entry") from exc

    metrics.increment("journal_entry_updated_total")
    logger.info(
        "journal_entry_updated",
        extra={"entry_id": entry.entry_id, "entry_date": entry.entry_date},
    )
    return EntryEnvelope(
        success=True,
        message="Journal entry updated successfully",
        data=serialize_entry(entry),
    )


@router.delete(
    "/{entry_id}",
    response_model=MessageEnvelope,
    response_model_exclude_unset=True,
    summary="Delete an entry permanently",
)
def delete_entry(
    entry_id: str,
    entry_gateway: JournalEntryGateway = Depends(get_entry_gateway),
) -> MessageEnvelope:
    try:
        entry_gateway.delete_entry(entry_id)
    except JournalEntryNotFoundError as exc:
        raise _entry_not_found(entry_id) from exc
    except JournalStorageError as exc:
        raise storage_failure("delete_entry", "Failed to delete journal entry") from exc

    metrics.increment("journal_entry_deleted_total")
    logger.info("journal_entry_deleted", extra={"entry_id": entry_id})
    return MessageEnvelope(success=True, message="Journal entry deleted successfully")


def _entry_not_found(entry_id: str) -> ApiError:
    logger.info("journal_entry_not_found", extra={"entry_id": entry_id})
    return ApiError(status.HTTP_404_NOT_FOUND, "Journal entry not found")

