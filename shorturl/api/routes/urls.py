"""Read-only mapping details endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service
from shorturl.db.session import get_db
from shorturl.services.exceptions import URLPersistenceError
from shorturl.services.shortener import RESOLVE_ERROR, ShortenedURLService

router = APIRouter(tags=["urls"])


@router.get(
    "/urls/{short_code}",
    response_model=schemas.MappingResponse,
    responses={404: {"model": schemas.ErrorResponse}, 500: {"model": schemas.ErrorResponse}},
)
async def get_mapping(
    short_code: str,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Show a mapping's destination and expiry without redirecting."""
    try:
        mapping = await shortener_service.get_mapping(db, short_code)
    except URLPersistenceError as e:
        logger.error("Mapping lookup failed", short_code=short_code, cause=repr(e.__cause__))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=RESOLVE_ERROR)

    if mapping is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="URL not found")

    return schemas.MappingResponse(
        short_url=mapping.short_code,
        destination_url=mapping.destination_url,
        created_at=mapping.created_at,
        expires_at=mapping.expires_at,
        is_expired=mapping.is_expired(),
    )
