"""URL Repository for the URL shortener service.

This module provides the URLRepository class for database operations on UrlMapping.
Every method is a single statement against the store, so each one is atomic
on its own.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shorturl.models.url import UrlMapping, UrlMappingCreate, UrlMappingUpdate, utcnow
from shorturl.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError


class URLRepository(BaseRepository[UrlMapping, UrlMappingCreate, UrlMappingUpdate]):
    """
    Repository for UrlMapping database operations.

    Lookups and updates are keyed by short_code; the unique index on that
    column is what detects colliding codes.
    """

    unique_field = "short_code"

    def __init__(self):
        """Initialize the repository with the UrlMapping model type."""
        super().__init__(UrlMapping)

    async def create_short_url(
        self,
        db: AsyncSession,
        data: Union[UrlMappingCreate, Dict[str, Any]]
    ) -> UrlMapping:
        """
        Insert a new mapping.

        Args:
            db: Database session
            data: Mapping data (either as a UrlMappingCreate model or dictionary)

        Returns:
            The created UrlMapping entity

        Raises:
            DuplicateEntityError: If the short code already exists
            RepositoryError: On other database errors
        """
        return await self.create(db, data)

    async def get_by_short_code(self, db: AsyncSession, short_code: str) -> Optional[UrlMapping]:
        """
        Find a mapping by its short code.

        Returns:
            The UrlMapping if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(self.model_type).where(self.model_type.short_code == short_code)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving URL by short code: {e}") from e

    async def update_by_short_code(
        self,
        db: AsyncSession,
        short_code: str,
        data: Union[UrlMappingUpdate, Dict[str, Any]]
    ) -> bool:
        """
        Apply a partial update to the mapping with the given short code.

        Returns:
            True if a mapping matched, False otherwise

        Raises:
            RepositoryError: On database errors
        """
        matched = await self.bulk_update(db, {"short_code": short_code}, data)
        return matched > 0

    async def delete_expired_urls(self, db: AsyncSession, now: Optional[datetime] = None) -> int:
        """
        Delete every mapping whose expiry lies before ``now``.

        Returns:
            Number of mappings deleted
        """
        return await self.bulk_delete(db, self.model_type.expires_at < (now or utcnow()))

    async def count_expired_urls(self, db: AsyncSession, now: Optional[datetime] = None) -> int:
        """Count mappings whose expiry lies before ``now``."""
        return await self.count(db, self.model_type.expires_at < (now or utcnow()))


__all__ = ["URLRepository", "RepositoryError", "DuplicateEntityError"]
