"""Basic tests to verify test DB setup and the store client lifecycle."""

import pytest
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, text
from sqlalchemy.pool import StaticPool

from shorturl.core.config import Settings
from shorturl.db.base import Database, DatabaseHealthCheck, get_engine_config
from shorturl.models.url import UrlMapping, utcnow


@pytest.mark.asyncio
async def test_create_tables(test_db):
    """Verify tables are created correctly in test database."""
    result = await test_db.execute(text("SELECT name FROM sqlite_master WHERE type='table' AND name='url_mappings'"))
    tables = [row[0] for row in result.fetchall()]
    assert "url_mappings" in tables

    mapping = UrlMapping(
        destination_url="https://example.com",
        short_code="test123",
    )
    test_db.add(mapping)
    await test_db.commit()

    result = await test_db.execute(select(UrlMapping).where(UrlMapping.short_code == "test123"))
    retrieved = result.scalars().first()

    assert retrieved is not None
    assert retrieved.destination_url == "https://example.com"
    assert retrieved.created_at is not None


@pytest.mark.asyncio
async def test_default_expiry_computed_per_insert(test_db):
    """Each new mapping gets its own now + 30 days, not a value fixed at import."""
    before = utcnow()
    mapping = UrlMapping(destination_url="https://example.com", short_code="perrow1")
    test_db.add(mapping)
    await test_db.commit()
    after = utcnow()

    delta_low = (mapping.expires_at - after).total_seconds()
    delta_high = (mapping.expires_at - before).total_seconds()
    assert delta_low <= 30 * 86400 <= delta_high


@pytest.mark.asyncio
async def test_short_code_index_is_unique(test_db):
    """The short_code column carries a unique index."""
    result = await test_db.execute(text("PRAGMA index_list('url_mappings')"))
    indexes = {row[1]: row[2] for row in result.fetchall()}

    assert indexes.get("ix_url_mappings_short_code") == 1


@pytest.mark.asyncio
async def test_database_connect_and_dispose():
    """The store client opens nothing until connect() and forgets its engine on dispose()."""
    database = Database("sqlite+aiosqlite:///:memory:")
    assert database.is_connected is False
    with pytest.raises(RuntimeError):
        database.session_factory()

    await database.connect(create_tables=True)
    assert database.is_connected is True

    health = await DatabaseHealthCheck.check_connection(database)
    assert health["status"] == "healthy"
    assert health["error"] is None

    await database.dispose()
    assert database.is_connected is False


@pytest.mark.asyncio
async def test_health_check_reports_unconnected_store():
    """A store that was never connected reports unhealthy without raising."""
    health = await DatabaseHealthCheck.check_connection(Database("sqlite+aiosqlite:///:memory:"))

    assert health["status"] == "unhealthy"
    assert health["error"] == "database unreachable"


def test_engine_config_per_backend():
    """SQLite shares one connection; other backends get a sized pool."""
    config = Settings(_env_file=None, ENVIRONMENT="production")

    sqlite_config = get_engine_config("sqlite+aiosqlite:///:memory:", config)
    assert sqlite_config["poolclass"] is StaticPool

    pg_config = get_engine_config("postgresql+asyncpg://u:p@db:5432/urls", config)
    assert pg_config["pool_size"] == config.POSTGRES_POOL_SIZE
    assert pg_config["pool_pre_ping"] is True


@pytest.mark.asyncio
async def test_timestamps_round_trip_as_aware_utc(test_db):
    """Stored timestamps come back zone-aware in UTC, whatever zone they were written in."""
    plus_two = timezone(timedelta(hours=2))
    written = datetime(2030, 1, 1, 14, 0, tzinfo=plus_two)
    mapping = UrlMapping(destination_url="https://example.com", short_code="tz1", expires_at=written)
    test_db.add(mapping)
    await test_db.commit()

    result = await test_db.execute(
        select(UrlMapping)
        .where(UrlMapping.short_code == "tz1")
        .execution_options(populate_existing=True)
    )
    loaded = result.scalar_one()

    assert loaded.expires_at.utcoffset() == timedelta(0)
    assert loaded.expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert loaded.created_at.tzinfo is not None
    assert loaded.is_expired(datetime(2030, 1, 1, 12, 1, tzinfo=timezone.utc)) is True


@pytest.mark.asyncio
async def test_naive_timestamp_taken_as_utc(test_db):
    mapping = UrlMapping(
        destination_url="https://example.com",
        short_code="tz2",
        expires_at=datetime(2030, 6, 1, 8, 30),
    )
    test_db.add(mapping)
    await test_db.commit()

    result = await test_db.execute(
        select(UrlMapping.expires_at).where(UrlMapping.short_code == "tz2")
    )

    assert result.scalar_one() == datetime(2030, 6, 1, 8, 30, tzinfo=timezone.utc)
