"""Router exports for FastAPI composition."""

from . import entries, health, search, stats

__all__ = ["entries", "health", "search", "stats"]
