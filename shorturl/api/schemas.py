"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. JSON keys are camelCase on the wire.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shorturl.core.config import settings


class CamelModel(BaseModel):
    """Base schema accepting and emitting camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request schema for creating a short code."""
    destination_url: str = Field(min_length=1)


class ShortenResponse(CamelModel):
    """The newly assigned short code."""
    short_url: str


class UpdateDestinationRequest(CamelModel):
    """Request schema for replacing a mapping's destination."""
    short_url: str = Field(min_length=1)
    destination_url: str = Field(min_length=1)


class ExtendExpiryRequest(CamelModel):
    """Request schema for resetting a mapping's expiry."""
    short_url: str = Field(min_length=1)
    days_to_add: int = Field(gt=0, le=settings.MAX_EXPIRATION_DAYS, strict=True)


class UpdatedResponse(CamelModel):
    """Whether a mapping was found and updated."""
    updated: bool


class MappingResponse(CamelModel):
    """Response schema for mapping details."""
    short_url: str
    destination_url: str
    created_at: datetime
    expires_at: datetime
    is_expired: bool


class ErrorResponse(BaseModel):
    """Error body returned for 4xx/5xx responses."""
    error: str
    details: Optional[List[Any]] = None
