"""Tests for YAML profile loading and environment overrides."""

from __future__ import annotations

import pytest

from backend.app.config import load_settings

pytestmark = [pytest.mark.config]


@pytest.fixture(autouse=True)
def _clear_overrides(monkeypatch):
    for name in (
        "DAYBOOK_CONFIG_PROFILE",
        "DAYBOOK_CONFIG_DIR",
        "DATABASE_URL",
        "DAYBOOK_ENTRY_STORE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_falls_back_to_defaults(monkeypatch, tmp_path):
    """Missing profiles should default to the built-in configuration."""

    monkeypatch.setenv("DAYBOOK_CONFIG_PROFILE", "missing")
    monkeypatch.setenv("DAYBOOK_CONFIG_DIR", str(tmp_path))
    settings = load_settings()

    assert settings.environment == "dev"
    assert settings.database_url.endswith("/daybook")
    assert settings.entry_store.backend == "postgres"
    assert settings.entry_store.fallback_to_memory is False
    assert settings.cors_origins == ["*"]
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "json"


def test_load_settings_reads_yaml_profile(monkeypatch, tmp_path):
    (tmp_path / "staging.yaml").write_text(
        """
environment: staging
database:
  url: "postgresql+psycopg://postgres:pw@db:5432/custom"
entry_store:
  backend: memory
  fallback_to_memory: true
cors:
  allow_origins:
    - "http://localhost:5173"
logging:
  level: debug
  format: console
""",
        encoding="utf-8",
    )
    monkeypatch.setenv("DAYBOOK_CONFIG_PROFILE", "staging")
    monkeypatch.setenv("DAYBOOK_CONFIG_DIR", str(tmp_path))

    settings = load_settings()

    assert settings.environment == "staging"
    assert settings.database_url.endswith("/custom")
    assert settings.entry_store.backend == "memory"
    assert settings.entry_store.fallback_to_memory is True
    assert settings.cors_origins == ["http://localhost:5173"]
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "console"
    assert settings.raw["environment"] == "staging"


def test_explicit_arguments_win_over_environment(monkeypatch, tmp_path):
    (tmp_path / "local.yml").write_text("environment: local\n", encoding="utf-8")
    monkeypatch.setenv("DAYBOOK_CONFIG_PROFILE", "other")

    settings = load_settings(profile="local", config_dir=tmp_path)

    assert settings.environment == "local"


def test_environment_overrides_profile_values(monkeypatch, tmp_path):
    (tmp_path / "dev.yaml").write_text(
        "entry_store:\n  backend: postgres\nlogging:\n  level: INFO\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DATABASE_URL", "sqlite:///override.db")
    monkeypatch.setenv("DAYBOOK_ENTRY_STORE", "Memory")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    settings = load_settings(profile="dev", config_dir=tmp_path)

    assert settings.database_url == "sqlite:///override.db"
    assert settings.entry_store.backend == "memory"
    assert settings.logging.level == "WARNING"


def test_unknown_log_format_falls_back_to_json(tmp_path):
    (tmp_path / "dev.yaml").write_text("logging:\n  format: xml\n", encoding="utf-8")

    settings = load_settings(profile="dev", config_dir=tmp_path)

    assert settings.logging.format == "json"


def test_unknown_entry_store_backend_is_rejected(tmp_path):
    (tmp_path / "dev.yaml").write_text("entry_store:\n  backend: mongo\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Unsupported entry_store backend"):
        load_settings(profile="dev", config_dir=tmp_path)


@pytest.mark.parametrize("body", ["- just\n- a list\n", "environment: [unclosed\n"])
def test_malformed_profile_is_rejected(tmp_path, body):
    (tmp_path / "dev.yaml").write_text(body, encoding="utf-8")

    with pytest.raises(RuntimeError):
        load_settings(profile="dev", config_dir=tmp_path)


def test_repository_profiles_load():
    dev = load_settings(profile="dev")
    test = load_settings(profile="test")

    assert dev.entry_store.backend == "postgres"
    assert dev.entry_store.fallback_to_memory is True
    assert test.entry_store.backend == "memory"
