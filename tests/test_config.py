"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from shorturl.core.config import Settings


def test_database_url_takes_precedence():
    config = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./urls.db")

    assert config.SQLALCHEMY_DATABASE_URI == "sqlite+aiosqlite:///./urls.db"


def test_db_url_alias_read_from_environment(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_URL", "postgresql+asyncpg://app:secret@db:5432/links")

    config = Settings(_env_file=None)

    assert config.SQLALCHEMY_DATABASE_URI == "postgresql+asyncpg://app:secret@db:5432/links"


def test_uri_built_from_components_when_url_empty(monkeypatch):
    monkeypatch.delenv("DB_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "")

    config = Settings(_env_file=None, POSTGRES_SERVER="pg", POSTGRES_DB="links")

    assert config.DATABASE_URL is None
    assert config.SQLALCHEMY_DATABASE_URI == "postgresql+asyncpg://postgres:postgres@pg:5432/links"


def test_defaults_match_service_contract():
    config = Settings(_env_file=None)

    assert config.DEFAULT_EXPIRATION_DAYS == 30
    assert config.SHORTEN_MAX_ATTEMPTS == 5
    assert config.SHORT_CODE_CHARS.isalnum()
    assert config.PORT == 3000


def test_cors_origins_comma_separated():
    config = Settings(_env_file=None, CORS_ORIGINS="https://a.example, https://b.example")

    assert config.CORS_ORIGINS == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize("field,value", [
    ("SHORT_CODE_CHARS", ""),
    ("SHORT_CODE_LENGTH", 0),
    ("SHORTEN_MAX_ATTEMPTS", 0),
    ("DEFAULT_EXPIRATION_DAYS", 0),
])
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
