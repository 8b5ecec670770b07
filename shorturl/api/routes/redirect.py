"""URL redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from shorturl.api.dependencies import get_shortener_service
from shorturl.db.session import get_db
from shorturl.services.exceptions import URLPersistenceError
from shorturl.services.shortener import RESOLVE_ERROR, ShortenedURLService

# Create router with tags
router = APIRouter(tags=["redirect"])

NOT_FOUND_MESSAGE = "URL not found"


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={404: {"description": NOT_FOUND_MESSAGE, "content": {"text/plain": {}}}},
)
async def redirect_to_destination(
    short_code: str,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the destination URL; expired mappings still redirect."""
    try:
        destination_url = await shortener_service.resolve(db, short_code)
    except URLPersistenceError as e:
        logger.error("Redirect lookup failed", short_code=short_code, cause=repr(e.__cause__))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=RESOLVE_ERROR)

    if destination_url is None:
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=destination_url, status_code=status.HTTP_302_FOUND)
