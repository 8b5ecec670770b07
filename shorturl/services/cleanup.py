"""Cleanup service for the URL shortener.

This module contains the CleanupService class, which removes mappings whose
expiry has passed. It only runs when the scheduled cleanup job is enabled;
otherwise expiry stays advisory and expired mappings keep resolving.
"""

import logging
import time
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.db.session import db_transaction
from shorturl.models.url import utcnow
from shorturl.repositories.url_repository import URLRepository
from shorturl.repositories.base import RepositoryError
from shorturl.services.exceptions import ExpiredURLCleanupError

logger = logging.getLogger(__name__)

CLEANUP_ERROR = "Failed to cleanup expired URLs"


class CleanupService:
    """Service for removing expired mappings."""

    def __init__(self, url_repository: URLRepository):
        """
        Initialize the cleanup service.

        Args:
            url_repository: Repository for mapping data access
        """
        self.url_repository = url_repository

    @db_transaction(db_param_name="db", commit_error=ExpiredURLCleanupError, commit_message=CLEANUP_ERROR)
    async def cleanup_expired_urls(self, db: AsyncSession) -> Dict[str, Any]:
        """
        Delete every mapping whose expiry lies in the past.

        Args:
            db: Database session

        Returns:
            Dict with the number of deleted mappings and the elapsed time

        Raises:
            ExpiredURLCleanupError: If cleanup fails
        """
        started = time.monotonic()
        try:
            deleted_count = await self.url_repository.delete_expired_urls(db, utcnow())
        except RepositoryError as e:
            logger.error(f"Error during expired URL cleanup: {e}")
            raise ExpiredURLCleanupError(CLEANUP_ERROR) from e

        execution_time = time.monotonic() - started
        logger.info(f"Cleanup completed: {deleted_count} URLs deleted in {execution_time:.2f}s")

        return {
            "deleted": deleted_count,
            "execution_time": execution_time,
        }

    async def get_cleanup_stats(self, db: AsyncSession) -> Dict[str, Any]:
        """
        Count mappings that the next cleanup run would delete.

        Raises:
            ExpiredURLCleanupError: If retrieval fails
        """
        try:
            expired_count = await self.url_repository.count_expired_urls(db)
        except RepositoryError as e:
            logger.error(f"Error getting cleanup stats: {e}")
            raise ExpiredURLCleanupError("Failed to get cleanup statistics") from e

        return {
            "expired_urls": expired_count,
            "timestamp": utcnow().isoformat(),
        }
