"""Config package exporting loader helpers."""

from .loader import EntryStoreConfig, LoggingConfig, Settings, load_settings

__all__ = ["Settings", "EntryStoreConfig", "LoggingConfig", "load_settings"]
