"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access service instances.
"""

from fastapi import Depends

from shorturl.core.config import settings
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.generator import ShortCodeGenerator
from shorturl.services.shortener import ShortenedURLService


async def get_url_repository() -> URLRepository:
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_short_code_generator() -> ShortCodeGenerator:
    """Get a short code generator configured from settings."""
    return ShortCodeGenerator(settings.SHORT_CODE_LENGTH, settings.SHORT_CODE_CHARS)


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
    generator: ShortCodeGenerator = Depends(get_short_code_generator),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(
        url_repository=url_repo,
        generator=generator,
        max_attempts=settings.SHORTEN_MAX_ATTEMPTS,
    )
