"""URL mapping data models.

This module defines the UrlMapping model that stores the association
between a short code, its destination URL and its expiry timestamp.
All timestamps are timezone-aware UTC.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from shorturl.core.config import settings


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def default_expiration() -> datetime:
    return utcnow() + timedelta(days=settings.DEFAULT_EXPIRATION_DAYS)


class UTCTimestamp(TypeDecorator):
    """
    ``TIMESTAMP WITH TIME ZONE`` that always binds and loads aware UTC values.

    Backends without zone support (SQLite) hand back naive values; those
    were written as UTC and get the UTC zone attached again on load.
    Naive values bound from Python are taken to be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class UrlMappingBase(SQLModel):
    """Base model for URL mapping data."""

    destination_url: str = Field(
        min_length=1,
        description="The destination (long) URL to redirect to"
    )
    short_code: str = Field(
        min_length=1,
        description="Unique code for the shortened URL",
        unique=True,
        index=True,
    )
    expires_at: datetime = Field(
        default_factory=default_expiration,
        sa_type=UTCTimestamp,
        description="When this mapping expires (advisory, not enforced on redirect)"
    )


class UrlMapping(UrlMappingBase, table=True):
    """
    URL mapping stored in the database.

    The short_code column carries the unique constraint the service relies
    on to detect collisions; expires_at is metadata only.
    """

    __tablename__ = "url_mappings"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCTimestamp,
        description="Timestamp when this mapping was created"
    )

    __table_args__ = (
        # Used by the expired mapping cleanup
        Index("ix_url_mappings_expires_at", "expires_at"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the mapping's expiry has passed.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            bool: True if expires_at lies in the past
        """
        return self.expires_at < (now or utcnow())

    @classmethod
    def generate_expiration(cls, days: Optional[int] = None) -> datetime:
        """Generate an expiration date the given number of days from now.

        Args:
            days: Number of days until expiration, defaults to
                settings.DEFAULT_EXPIRATION_DAYS

        Returns:
            datetime: UTC expiration timestamp
        """
        if days is None:
            days = settings.DEFAULT_EXPIRATION_DAYS
        return utcnow() + timedelta(days=days)


class UrlMappingCreate(UrlMappingBase):
    """Schema for creating a new mapping."""
    pass


class UrlMappingUpdate(SQLModel):
    """Schema for a partial mapping update."""
    destination_url: Optional[str] = None
    expires_at: Optional[datetime] = None
