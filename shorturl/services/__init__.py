"""Service layer for the URL shortener.

This package contains service classes implementing the business logic of the service.
Services orchestrate interactions between repositories and provide domain-specific operations.
"""

from shorturl.services.generator import ShortCodeGenerator
from shorturl.services.shortener import ShortenedURLService
from shorturl.services.cleanup import CleanupService

__all__ = ["ShortCodeGenerator", "ShortenedURLService", "CleanupService"]
