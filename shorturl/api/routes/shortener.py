"""Shorten, update and expiry endpoints.

Validation failures answer 400 with the reason; store failures answer 500
with a fixed message per operation, and the cause only goes to the log.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service
from shorturl.db.session import get_db
from shorturl.services.exceptions import (
    ShortCodeGenerationError,
    URLPersistenceError,
    URLValidationError,
)
from shorturl.services.shortener import (
    EXPIRY_ERROR,
    SHORTEN_ERROR,
    UPDATE_ERROR,
    ShortenedURLService,
)

router = APIRouter(tags=["shortener"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": schemas.ErrorResponse, "description": "Store failure"},
}


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    responses=ERROR_RESPONSES,
)
async def shorten_url(
    payload: schemas.ShortenRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        short_code = await shortener_service.shorten_url(
            db=db,
            destination_url=payload.destination_url,
        )
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (URLPersistenceError, ShortCodeGenerationError) as e:
        logger.error("Shorten failed", error=repr(e), cause=repr(e.__cause__))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SHORTEN_ERROR)
    return schemas.ShortenResponse(short_url=short_code)


@router.put(
    "/update",
    response_model=schemas.UpdatedResponse,
    responses=ERROR_RESPONSES,
)
async def update_destination(
    payload: schemas.UpdateDestinationRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        updated = await shortener_service.update_destination(
            db=db,
            short_code=payload.short_url,
            destination_url=payload.destination_url,
        )
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except URLPersistenceError as e:
        logger.error("Update failed", short_code=payload.short_url, cause=repr(e.__cause__))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UPDATE_ERROR)
    return schemas.UpdatedResponse(updated=updated)


@router.put(
    "/expiry",
    response_model=schemas.UpdatedResponse,
    responses=ERROR_RESPONSES,
)
async def extend_expiry(
    payload: schemas.ExtendExpiryRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        updated = await shortener_service.extend_expiry(
            db=db,
            short_code=payload.short_url,
            days_to_add=payload.days_to_add,
        )
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except URLPersistenceError as e:
        logger.error("Expiry update failed", short_code=payload.short_url, cause=repr(e.__cause__))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=EXPIRY_ERROR)
    return schemas.UpdatedResponse(updated=updated)

