"""Tests for the URL repository."""

import pytest
from datetime import timedelta

from shorturl.repositories.url_repository import DuplicateEntityError
from shorturl.models.url import UrlMappingCreate, UrlMappingUpdate, utcnow
from tests.utils import create_test_mapping, random_url


@pytest.mark.repository
class TestURLRepository:
    """Test suite for URL repository."""

    @pytest.mark.asyncio
    async def test_create_short_url(self, test_db, url_repository):
        """Test mapping creation."""
        test_url = random_url()
        short_code = "testcreate"

        mapping = await url_repository.create_short_url(
            db=test_db,
            data=UrlMappingCreate(destination_url=test_url, short_code=short_code),
        )

        assert mapping.id is not None
        assert mapping.destination_url == test_url
        assert mapping.short_code == short_code
        assert mapping.expires_at > utcnow() + timedelta(days=29)

        db_mapping = await url_repository.get_by_short_code(test_db, short_code)
        assert db_mapping is not None
        assert db_mapping.destination_url == test_url

    @pytest.mark.asyncio
    async def test_create_from_dict(self, test_db, url_repository):
        """Dict input works and keeps an explicit expiry."""
        expires_at = utcnow() + timedelta(days=3)

        mapping = await url_repository.create_short_url(
            test_db,
            {"destination_url": "https://example.com", "short_code": "fromdict", "expires_at": expires_at},
        )

        assert mapping.expires_at == expires_at

    @pytest.mark.asyncio
    async def test_create_duplicate_short_code(self, test_db, url_repository):
        """Test duplicate short code handling."""
        short_code = "duplicate"
        await create_test_mapping(test_db, short_code=short_code)

        with pytest.raises(DuplicateEntityError) as excinfo:
            await url_repository.create_short_url(
                db=test_db,
                data=UrlMappingCreate(destination_url=random_url(), short_code=short_code),
            )

        assert excinfo.value.field_name == "short_code"
        assert excinfo.value.value == short_code

    @pytest.mark.asyncio
    async def test_get_by_short_code_nonexistent(self, test_db, url_repository):
        """Test retrieving nonexistent mapping."""
        assert await url_repository.get_by_short_code(test_db, "nonexistent") is None

    @pytest.mark.asyncio
    async def test_update_by_short_code(self, test_db, url_repository):
        """Only the given fields change."""
        mapping = await create_test_mapping(test_db, short_code="upd1")
        original_expiry = mapping.expires_at

        updated = await url_repository.update_by_short_code(
            test_db, "upd1", UrlMappingUpdate(destination_url="https://new.example.com")
        )
        await test_db.commit()

        assert updated is True
        db_mapping = await url_repository.get_by_short_code(test_db, "upd1")
        assert db_mapping.destination_url == "https://new.example.com"
        assert db_mapping.expires_at == original_expiry

    @pytest.mark.asyncio
    async def test_update_by_short_code_missing(self, test_db, url_repository):
        """A miss reports False and inserts nothing."""
        updated = await url_repository.update_by_short_code(
            test_db, "missing", {"destination_url": "https://new.example.com"}
        )

        assert updated is False
        assert await url_repository.count(test_db) == 0

    @pytest.mark.asyncio
    async def test_update_without_values_rejected(self, test_db, url_repository):
        with pytest.raises(ValueError):
            await url_repository.update_by_short_code(test_db, "anything", UrlMappingUpdate())

    @pytest.mark.asyncio
    async def test_expired_urls_counted_and_deleted(self, test_db, url_repository):
        """Only mappings whose expiry passed are removed."""
        now = utcnow()
        await create_test_mapping(test_db, short_code="old1", expires_at=now - timedelta(days=2))
        await create_test_mapping(test_db, short_code="old2", expires_at=now - timedelta(minutes=1))
        await create_test_mapping(test_db, short_code="live1", expires_at=now + timedelta(days=1))

        assert await url_repository.count_expired_urls(test_db, now) == 2

        deleted = await url_repository.delete_expired_urls(test_db, now)
        await test_db.commit()

        assert deleted == 2
        assert await url_repository.count(test_db) == 1
        assert await url_repository.get_by_short_code(test_db, "live1") is not None
        assert await url_repository.get_by_short_code(test_db, "old1") is None

    @pytest.mark.asyncio
    async def test_is_expired(self, test_db):
        now = utcnow()
        expired = await create_test_mapping(test_db, expires_at=now - timedelta(seconds=1))
        active = await create_test_mapping(test_db, expires_at=now + timedelta(days=1))

        assert expired.is_expired(now) is True
        assert active.is_expired(now) is False
