"""Routes package initialization.

This module exports the route collection for the service.
"""

from fastapi import APIRouter

from shorturl.api.routes import shortener, redirect, health, urls
from shorturl.core.config import settings

# Create root router
api_router = APIRouter()

# Shorten/update/expiry live at the root, next to the short codes
api_router.include_router(shortener.router)

# Health and mapping details under the API prefix
api_router.include_router(health.router, prefix=settings.API_PREFIX)
api_router.include_router(urls.router, prefix=settings.API_PREFIX)

# Redirect last: /{short_code} matches any single path segment
api_router.include_router(redirect.router)

__all__ = ["api_router"]
