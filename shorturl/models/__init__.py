"""
Data models for the URL shortener service.

This module imports and exports all SQLModel models used in the service.
"""

# First import SQLModel itself to ensure metadata is initialized
from sqlmodel import SQLModel

from shorturl.models.url import (
    UrlMapping,
    UrlMappingBase,
    UrlMappingCreate,
    UrlMappingUpdate,
    utcnow,
)

__all__ = [
    "SQLModel",
    "UrlMapping",
    "UrlMappingBase",
    "UrlMappingCreate",
    "UrlMappingUpdate",
    "utcnow",
]
