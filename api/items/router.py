"""
Item API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from core import errors, settings

from . import schemas
from .dependencies import get_catalog_service
from .service import CatalogService

router = APIRouter()

logger = logging.getLogger(__name__)


def _http_error(exc: errors.CatalogError, event: str) -> HTTPException:
    if isinstance(exc, (errors.StorageError, errors.DeserializationError)):
        logger.exception("%s error=%s", event, exc)
    return errors.to_http_exception(exc)


def parse_item_id(raw: str) -> int:
    """
    Validate the `{id}` path value; ids are zero-based positions.
    """
    try:
        value = int(raw)
    except ValueError as e:
        raise errors.ValidationError("id should be a number") from e
    if value < 0:
        raise errors.ValidationError("id should be a positive number")
    return value


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    return bytes(buf)


@router.get("/items")
async def get_items(
    service: CatalogService = Depends(get_catalog_service),
) -> schemas.ItemsResponse:
    try:
        items = await service.list_items()
    except errors.CatalogError as exc:
        raise _http_error(exc, "list_items_failed") from exc
    return schemas.ItemsResponse(items=items)


@router.post("/items")
async def add_item(
    name: str = Form(default=""),
    category: str = Form(default=""),
    image: UploadFile | None = File(default=None),
    service: CatalogService = Depends(get_catalog_service),
) -> schemas.AddItemResponse:
    """
    Add an item from a multipart form (`name`, `category`, optional `image`).
    """
    data = None
    if image is not None:
        data = await read_upload_bytes(image, max_bytes=settings.max_upload_bytes())

    try:
        item = await service.create_item(name, category, data)
    except errors.CatalogError as exc:
        raise _http_error(exc, "add_item_failed") from exc

    message = f"item received: name: {item.name}, category: {item.category}, image_name: {item.image_name}"
    return schemas.AddItemResponse(message=message, item=item)


@router.get("/items/{item_id}")
async def get_item(
    item_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> schemas.Item:
    try:
        position = parse_item_id(item_id)
        return await service.get_item(position)
    except errors.CatalogError as exc:
        raise _http_error(exc, "get_item_failed") from exc
