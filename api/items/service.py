"""
Catalogue orchestration.

Flow for a new item:
1) Validate name/category
2) Store the image (content-addressed) when one is supplied
3) Append `{name, category, image_name}` to the item store

Store and repository calls are blocking file I/O and run in worker threads.
Cancelling the calling task takes effect between steps; a write that has
already started finishes (or fails) on its own.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from core.errors import InvalidPathError, NotFoundError, ValidationError
from images.store import ImageStore

from .repository import ItemRepository
from .schemas import Item

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(
        self,
        *,
        image_store: ImageStore,
        item_repository: ItemRepository,
        default_image_path: Path | str | None = None,
    ):
        self.image_store = image_store
        self.item_repository = item_repository
        self.default_image_path = Path(default_image_path) if default_image_path is not None else None

    async def create_item(self, name: str, category: str, image: bytes | None = None) -> Item:
        """
        Create and persist a new item.

        Nothing is written when name or category is missing. If the insert
        fails after the image was stored, the image stays; it is addressed by
        content and a retry with the same bytes reuses it.
        """
        name = name or ""
        category = category or ""
        # Blank values are rejected but stored text is kept as given.
        if not name.strip():
            raise ValidationError("name is required")
        if not category.strip():
            raise ValidationError("category is required")

        image_name = ""
        if image is not None:
            image_name = await asyncio.to_thread(self.image_store.put, image)

        item = Item(name=name, category=category, image_name=image_name)
        await asyncio.to_thread(self.item_repository.insert, item)

        logger.info(
            "item_created name=%s category=%s image_name=%s",
            item.name,
            item.category,
            item.image_name,
        )
        return item

    async def list_items(self) -> list[Item]:
        return await asyncio.to_thread(self.item_repository.get_all)

    async def get_item(self, position: int) -> Item:
        return await asyncio.to_thread(self.item_repository.get, position)

    async def resolve_image(self, requested_name: str, default_path: Path | str | None = None) -> Path:
        """
        Resolve an image name to a file path.

        A missing image falls back to the default asset; an unsafe name is
        re-raised as InvalidPathError. NotFoundError propagates when there is
        no default or the default file itself is missing.
        """
        fallback = Path(default_path) if default_path is not None else self.default_image_path

        try:
            return await asyncio.to_thread(self.image_store.resolve, requested_name)
        except InvalidPathError as exc:
            logger.warning("invalid_image_path requested=%r reason=%s", requested_name, exc.reason)
            raise
        except NotFoundError:
            if fallback is None:
                raise
            if not await asyncio.to_thread(fallback.is_file):
                logger.error("default_image_missing path=%s", fallback)
                raise
            logger.debug("image_fallback requested=%r default=%s", requested_name, fallback)
            return fallback
