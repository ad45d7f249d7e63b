"""
Image API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from core import errors
from items.dependencies import get_catalog_service
from items.service import CatalogService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/images/{filename}")
async def get_image(
    filename: str,
    service: CatalogService = Depends(get_catalog_service),
) -> FileResponse:
    """
    Return a stored image, or the default image when it does not exist.
    """
    try:
        path = await service.resolve_image(filename)
    except errors.CatalogError as exc:
        if isinstance(exc, errors.StorageError):
            logger.exception("get_image_failed filename=%r", filename)
        raise errors.to_http_exception(exc) from exc

    logger.info("returned_image path=%s", path)
    return FileResponse(path, media_type="image/jpeg")
