"""URL shortening service for the URL shortener.

This module contains the ShortenedURLService class which implements the
business logic for creating, resolving and updating short code mappings.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.core.config import settings
from shorturl.db.session import db_transaction
from shorturl.models.url import UrlMapping, UrlMappingUpdate
from shorturl.repositories.url_repository import URLRepository
from shorturl.repositories.base import RepositoryError, DuplicateEntityError
from shorturl.services.exceptions import (
    InvalidExpiryError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeCollisionError,
    URLPersistenceError,
)
from shorturl.services.generator import ShortCodeGenerator

logger = logging.getLogger(__name__)

# Messages returned to callers; the underlying error is chained and logged
SHORTEN_ERROR = "Error while shortening URL"
UPDATE_ERROR = "Error while updating short URL"
RESOLVE_ERROR = "Error while getting destination URL"
EXPIRY_ERROR = "Error while updating expiry time"


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Mappings never get deduplicated: shortening the same destination twice
    yields two codes. Expiry is recorded but not checked when resolving.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        generator: Optional[ShortCodeGenerator] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for mapping data access
            generator: Short code generator, a default one when omitted
            max_attempts: Inserts tried before giving up on colliding codes,
                defaults to settings.SHORTEN_MAX_ATTEMPTS
        """
        self.url_repository = url_repository
        self.generator = generator or ShortCodeGenerator()
        self.max_attempts = settings.SHORTEN_MAX_ATTEMPTS if max_attempts is None else max_attempts

        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @db_transaction(db_param_name="db", commit_error=URLPersistenceError, commit_message=SHORTEN_ERROR)
    async def shorten_url(self, db: AsyncSession, destination_url: str) -> str:
        """
        Create a mapping for a destination URL under a freshly generated code.

        A generated code that collides with an existing one is discarded and
        a new one is drawn. Each attempt is a separate insert.

        Args:
            db: Database session
            destination_url: The URL the short code will redirect to

        Returns:
            str: The newly assigned short code

        Raises:
            InvalidURLError: If destination_url is missing or empty
            ShortCodeGenerationError: If the generator cannot produce a code
            ShortCodeCollisionError: If every attempt collided
            URLPersistenceError: If the store fails
        """
        self._validate_destination(destination_url)

        for attempt in range(1, self.max_attempts + 1):
            short_code = self.generator.generate()
            try:
                mapping = await self.url_repository.create_short_url(
                    db,
                    {
                        "destination_url": destination_url,
                        "short_code": short_code,
                        "expires_at": UrlMapping.generate_expiration(),
                    },
                )
            except DuplicateEntityError:
                logger.warning(
                    f"Short code collision on attempt {attempt}/{self.max_attempts}: {short_code}"
                )
                continue
            except RepositoryError as e:
                logger.error(f"Error creating short URL: {e}")
                raise URLPersistenceError(SHORTEN_ERROR) from e

            logger.info(f"Created short code {mapping.short_code}")
            return mapping.short_code

        logger.error(f"Gave up after {self.max_attempts} colliding short codes")
        raise ShortCodeCollisionError(SHORTEN_ERROR)

    @db_transaction(db_param_name="db", commit_error=URLPersistenceError, commit_message=UPDATE_ERROR)
    async def update_destination(self, db: AsyncSession, short_code: str, destination_url: str) -> bool:
        """
        Replace the destination of an existing mapping.

        Returns:
            bool: True if a mapping was found and updated, False if none exists

        Raises:
            InvalidShortCodeError: If short_code is missing or empty
            InvalidURLError: If destination_url is missing or empty
            URLPersistenceError: If the store fails
        """
        self._validate_short_code(short_code)
        self._validate_destination(destination_url)

        try:
            updated = await self.url_repository.update_by_short_code(
                db, short_code, UrlMappingUpdate(destination_url=destination_url)
            )
        except RepositoryError as e:
            logger.error(f"Error updating short URL {short_code}: {e}")
            raise URLPersistenceError(UPDATE_ERROR) from e

        if not updated:
            logger.info(f"No mapping to update for short code {short_code}")
        return updated

    async def resolve(self, db: AsyncSession, short_code: str) -> Optional[str]:
        """
        Look up the destination URL for a short code.

        Expired mappings still resolve.

        Returns:
            The destination URL, or None if no mapping exists

        Raises:
            URLPersistenceError: If the store fails
        """
        mapping = await self._lookup(db, short_code, RESOLVE_ERROR)
        return mapping.destination_url if mapping else None

    async def get_mapping(self, db: AsyncSession, short_code: str) -> Optional[UrlMapping]:
        """Return the full mapping for a short code, or None."""
        return await self._lookup(db, short_code, RESOLVE_ERROR)

    @db_transaction(db_param_name="db", commit_error=URLPersistenceError, commit_message=EXPIRY_ERROR)
    async def extend_expiry(self, db: AsyncSession, short_code: str, days_to_add: int) -> bool:
        """
        Reset a mapping's expiry to now plus the given number of days.

        The previous expiry is ignored, not added to.

        Returns:
            bool: True if a mapping was found and updated, False if none exists

        Raises:
            InvalidShortCodeError: If short_code is missing or empty
            InvalidExpiryError: If days_to_add is not a positive integer or
                exceeds settings.MAX_EXPIRATION_DAYS
            URLPersistenceError: If the store fails
        """
        self._validate_short_code(short_code)
        if isinstance(days_to_add, bool) or not isinstance(days_to_add, int) or days_to_add <= 0:
            raise InvalidExpiryError("daysToAdd must be a positive integer")
        if days_to_add > settings.MAX_EXPIRATION_DAYS:
            raise InvalidExpiryError(f"daysToAdd must be at most {settings.MAX_EXPIRATION_DAYS}")

        try:
            expires_at = UrlMapping.generate_expiration(days_to_add)
        except OverflowError as e:
            raise InvalidExpiryError("daysToAdd is too large") from e

        try:
            return await self.url_repository.update_by_short_code(
                db, short_code, UrlMappingUpdate(expires_at=expires_at)
            )
        except RepositoryError as e:
            logger.error(f"Error updating expiry of {short_code}: {e}")
            raise URLPersistenceError(EXPIRY_ERROR) from e

    async def _lookup(self, db: AsyncSession, short_code: str, error_message: str) -> Optional[UrlMapping]:
        if not short_code:
            return None
        try:
            return await self.url_repository.get_by_short_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error retrieving short URL {short_code}: {e}")
            raise URLPersistenceError(error_message) from e

    @staticmethod
    def _validate_destination(destination_url: Any) -> None:
        if not isinstance(destination_url, str) or not destination_url.strip():
            raise InvalidURLError("destinationUrl must be a non-empty string")

    @staticmethod
    def _validate_short_code(short_code: Any) -> None:
        if not isinstance(short_code, str) or not short_code.strip():
            raise InvalidShortCodeError("shortUrl must be a non-empty string")
