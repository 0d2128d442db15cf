# tests/unit/core/test_config.py
import pytest
from pydantic import ValidationError

from stockops.core.config import Settings, get_settings, clear_settings_cache

REQUIRED = {
    "DATABASE_URL": "postgresql://svc:pw@db.internal:5432/clinic",
    "SUPABASE_URL": "https://clinic.supabase.test",
    "SUPABASE_ANON_KEY": "anon-key",
}


def test_async_database_url_selects_asyncpg():
    settings = Settings(**REQUIRED)

    assert settings.async_database_url == "postgresql+asyncpg://svc:pw@db.internal:5432/clinic"


def test_async_database_url_left_alone_when_driver_given():
    settings = Settings(**{**REQUIRED, "DATABASE_URL": "postgresql+asyncpg://svc:pw@db/clinic"})

    assert settings.async_database_url == "postgresql+asyncpg://svc:pw@db/clinic"


def test_defaults():
    settings = Settings(**REQUIRED)

    assert settings.SNAPSHOT_PROCEDURE == "snapshot_opening_at_1am_ist"
    assert settings.SALARY_ACCESS_PASSWORD is None
    assert settings.cors_headers == {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    }


@pytest.mark.parametrize("name", ["snapshot; DROP TABLE stock_items", "Snapshot", "1snapshot", ""])
def test_rejects_bad_procedure_names(name):
    with pytest.raises(ValidationError):
        Settings(**REQUIRED, SNAPSHOT_PROCEDURE=name)


def test_missing_required_settings(monkeypatch):
    for key in REQUIRED:
        monkeypatch.delenv(key, raising=False)

    with pytest.raises(ValidationError):
        Settings()


def test_settings_from_environment(monkeypatch):
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("CORS_ALLOW_HEADERS", "Authorization, apikey")
    clear_settings_cache()

    try:
        settings = get_settings()
        assert settings.CORS_ALLOW_HEADERS == ["authorization", "apikey"]
        assert get_settings() is settings
    finally:
        clear_settings_cache()
