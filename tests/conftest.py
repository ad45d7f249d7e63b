"""Shared fixtures: temporary image directory, item file and API client."""

import os

import pytest
from fastapi.testclient import TestClient

from images.store import FileImageStore
from items.repository import JsonFileItemRepository
from items.service import CatalogService

DEFAULT_IMAGE_BYTES = b"\xff\xd8\xff\xe0default-placeholder\xff\xd9"


@pytest.fixture
def umask_022():
    """Run the test under a conventional 022 umask."""
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@pytest.fixture
def image_dir(tmp_path):
    path = tmp_path / "images"
    path.mkdir()
    (path / "default.jpg").write_bytes(DEFAULT_IMAGE_BYTES)
    return path


@pytest.fixture
def items_file(tmp_path):
    return tmp_path / "items.json"


@pytest.fixture
def image_store(image_dir):
    return FileImageStore(image_dir)


@pytest.fixture
def item_repository(items_file):
    return JsonFileItemRepository(items_file)


@pytest.fixture
def service(image_store, item_repository, image_dir):
    return CatalogService(
        image_store=image_store,
        item_repository=item_repository,
        default_image_path=image_dir / "default.jpg",
    )


@pytest.fixture
def client(monkeypatch, image_dir, items_file):
    monkeypatch.setenv("IMAGE_DIR", str(image_dir))
    monkeypatch.setenv("ITEMS_FILE", str(items_file))

    from main import app

    with TestClient(app) as test_client:
        yield test_client
