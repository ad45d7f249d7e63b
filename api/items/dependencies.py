"""
Catalogue service wiring for FastAPI routes.

This module owns the process-wide CatalogService. FastAPI builds it on
startup and drops it on shutdown (see `api/main.py`).
"""

from __future__ import annotations

from core import settings
from images.store import FileImageStore

from .repository import JsonFileItemRepository
from .service import CatalogService

_service: CatalogService | None = None


def init_service() -> None:
    global _service
    if _service is not None:
        return None
    _service = CatalogService(
        image_store=FileImageStore(settings.image_dir()),
        item_repository=JsonFileItemRepository(settings.items_file()),
        default_image_path=settings.default_image_path(),
    )


def close_service() -> None:
    global _service
    _service = None


def get_catalog_service() -> CatalogService:
    if _service is None:
        raise RuntimeError("Catalog service is not initialized. Call init_service() on startup.")
    return _service
