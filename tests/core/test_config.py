"""Tests for process settings read from the environment."""

import pytest

from sqlgate.core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DB_LOCK_TIMEOUT_SEC", raising=False)
    monkeypatch.delenv("ENGINE_ERROR_STATUS_CODE", raising=False)
    s = Settings(_env_file=None)
    assert s.DB_LOCK_TIMEOUT_SEC == 30.0
    assert s.ENGINE_ERROR_STATUS_CODE == 400


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENGINE_ERROR_STATUS_CODE", "500")
    monkeypatch.setenv("DATABASES_FILE", "/etc/sqlgate/databases.json")
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["http://localhost:3000/", "https://example.com"]')
    s = Settings(_env_file=None)
    assert s.ENGINE_ERROR_STATUS_CODE == 500
    assert s.DATABASES_FILE == "/etc/sqlgate/databases.json"
    assert s.all_cors_origins == ["http://localhost:3000", "https://example.com"]
