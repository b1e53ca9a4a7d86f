"""Uniform ``{success, message, data, count}`` response envelope."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.journal.models import JournalEntry
from ..domain.journal.stats import JournalStats
from ..infra.logging import get_logger
from ..infra.metrics import get_metrics_client

__all__ = [
    "ApiError",
    "EntryEnvelope",
    "EntryListEnvelope",
    "EntryPayload",
    "Envelope",
    "MessageEnvelope",
    "StatsEnvelope",
    "StatsPayload",
    "error_response",
    "install_exception_handlers",
    "serialize_entry",
    "serialize_stats",
    "storage_failure",
]

logger = get_logger(__name__)

DataT = TypeVar("DataT")

API_PREFIX = "/api"
INVALID_DATA_MESSAGE = "Invalid data provided"
NOT_FOUND_MESSAGE = "API endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"

# Routing misses under the API prefix, whether by path or by method.
UNMATCHED_ROUTE_STATUSES = (
    status.HTTP_404_NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED,
)


class Envelope(BaseModel, Generic[DataT]):
    success: bool
    message: Optional[str] = None
    data: Optional[DataT] = None
    count: Optional[int] = None


class MessageEnvelope(BaseModel):
    success: bool
    message: Optional[str] = None


class EntryPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str
    content: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class StatsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_entries: int = Field(alias="totalEntries")
    avg_words_per_entry: int = Field(alias="avgWordsPerEntry")
    first_entry_date: Optional[str] = Field(alias="firstEntryDate")
    last_entry_date: Optional[str] = Field(alias="lastEntryDate")
    total_words: int = Field(alias="totalWords")


EntryEnvelope = Envelope[EntryPayload]
EntryListEnvelope = Envelope[List[EntryPayload]]
StatsEnvelope = Envelope[StatsPayload]


class ApiError(Exception):
    """Raised by routers to end a request with an error envelope."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def serialize_entry(entry: JournalEntry) -> EntryPayload:
    return EntryPayload(
        id=entry.entry_id,
        date=entry.entry_date,
        content=entry.content,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def serialize_stats(stats: JournalStats) -> StatsPayload:
    return StatsPayload(
        total_entries=stats.total_entries,
        avg_words_per_entry=stats.avg_words_per_entry,
        first_entry_date=stats.first_entry_date,
        last_entry_date=stats.last_entry_date,
        total_words=stats.total_words,
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(
        "request_validation_failed",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_DATA_MESSAGE)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code in UNMATCHED_ROUTE_STATUSES and request.url.path.startswith(
        API_PREFIX
    ):
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_request_error",
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def install_exception_handlers(application: FastAPI) -> None:
    """Render every failure as an envelope with ``success: false``."""

    application.add_exception_handler(ApiError, _api_error_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)


def storage_failure(operation: str, message: str) -> ApiError:
    """Log the active storage exception and build the generic 500 error."""

    logger.exception("journal_store_failure", extra={"operation": operation})
    get_metrics_client().increment("journal_store_error_total")
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
