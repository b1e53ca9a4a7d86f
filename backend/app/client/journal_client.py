"""HTTP client for the journal API with a client-side entry cache.

The cache is never patched in place: every mutating call is followed by a
fresh ``GET /api/entries`` whose result replaces the cached list wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ..infra.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CACHE_SIZE = 500


def _parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class JournalApiError(Exception):
    """The API answered with ``success: false`` or a non-JSON error."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class RemoteEntry:
    entry_id: str
    date: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_api(cls, data: dict) -> "RemoteEntry":
        return cls(
            entry_id=data["id"],
            date=data["date"],
            content=data["content"],
            created_at=_parse_timestamp(data["createdAt"]),
            updated_at=_parse_timestamp(data["updatedAt"]),
        )


@dataclass(frozen=True)
class RemoteStats:
    total_entries: int
    avg_words_per_entry: int
    first_entry_date: Optional[str]
    last_entry_date: Optional[str]
    total_words: int

    @classmethod
    def from_api(cls, data: dict) -> "RemoteStats":
        return cls(
            total_entries=int(data["totalEntries"]),
            avg_words_per_entry=int(data["avgWordsPerEntry"]),
            first_entry_date=data.get("firstEntryDate"),
            last_entry_date=data.get("lastEntryDate"),
            total_words=int(data["totalWords"]),
        )


class EntryCache:
    """Bounded snapshot of the newest entries known to the client."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: List[RemoteEntry] = []
        self._loaded = False

    @property
    def entries(self) -> List[RemoteEntry]:
        return list(self._entries)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def replace(self, entries: List[RemoteEntry]) -> None:
        """Swap in a new snapshot, keeping at most ``max_entries``."""

        self._entries = list(entries[: self.max_entries])
        self._loaded = True

    def clear(self) -> None:
        self._entries = []
        self._loaded = False

    def find_by_id(self, entry_id: str) -> Optional[RemoteEntry]:
        return next((e for e in self._entries if e.entry_id == entry_id), None)

    def find_by_date(self, entry_date: str) -> Optional[RemoteEntry]:
        return next((e for e in self._entries if e.date == entry_date), None)

    def __len__(self) -> int:
        return len(self._entries)


class JournalClient:
    """Synchronous client for ``/api/entries``, ``/api/search`` and ``/api/stats``."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: Optional[httpx.Client] = None,
        cache: Optional[EntryCache] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        self._http = http_client
        self.cache = cache if cache is not None else EntryCache()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "JournalClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def refresh(self) -> List[RemoteEntry]:
        """Reload every entry from the server into the cache."""

        body = self._request("GET", "/api/entries")
        entries = [RemoteEntry.from_api(item) for item in body.get("data") or []]
        self.cache.replace(entries)
        return self.cache.entries

    def get_entry(self, entry_date: str) -> Optional[RemoteEntry]:
        try:
            body = self._request("GET", f"/api/entries/{entry_date}")
        except JournalApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        return RemoteEntry.from_api(body["data"])

    def search(self, query: str) -> List[RemoteEntry]:
        body = self._request("GET", "/api/search", params={"q": query})
        return [RemoteEntry.from_api(item) for item in body.get("data") or []]

    def stats(self) -> RemoteStats:
        body = self._request("GET", "/api/stats")
        return RemoteStats.from_api(body["data"])

    # ------------------------------------------------------------------
    # Writes (each followed by a cache refresh)
    # ------------------------------------------------------------------
    def save_entry(self, entry_date: str, content: str) -> tuple[RemoteEntry, bool]:
        """Create or overwrite the entry for ``entry_date``; returns ``(entry, created)``."""

        response = self._send(
            "POST", "/api/entries", json={"date": entry_date, "content": content}
        )
        body = self._unwrap(response)
        self.refresh()
        return RemoteEntry.from_api(body["data"]), response.status_code == 201

    def update_entry(self, entry_id: str, content: str) -> RemoteEntry:
        body = self._request("PUT", f"/api/entries/{entry_id}", json={"content": content})
        self.refresh()
        return RemoteEntry.from_api(body["data"])

    def delete_entry(self, entry_id: str) -> None:
        self._request("DELETE", f"/api/entries/{entry_id}")
        self.refresh()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        return self._unwrap(self._send(method, path, **kwargs))

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("journal_api_request", extra={"method": method, "path": path})
        return self._http.request(method, path, **kwargs)

    def _unwrap(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise JournalApiError(response.status_code, response.text or "invalid response") from exc
        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise JournalApiError(response.status_code, message or "request failed")
        return body
