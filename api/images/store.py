"""
Content-addressed image storage.

Images are stored under a single root directory, named by the SHA-256 of
their bytes plus a fixed `.jpg` extension. Identical uploads map to the same
file and are written at most once.

Request filenames are validated (no escape from the root, accepted extension)
before the filesystem is consulted, so "unsafe name" and "absent file" stay
separate errors.
"""

from __future__ import annotations

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote

from core.errors import InvalidPathError, NotFoundError, StorageError, ValidationError
from core.fileio import write_atomic

IMAGE_EXTENSION = ".jpg"
ACCEPTED_EXTENSIONS = (".jpg", ".jpeg")

logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    def put(self, data: bytes) -> str:
        """Store `data` and return its reference (`<sha256>.jpg`)."""
        ...

    def resolve(self, requested_name: str) -> Path:
        """Return the on-disk path for a stored image name."""
        ...


def image_reference(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest() + IMAGE_EXTENSION


def build_image_path(root: Path, requested_name: str) -> Path:
    """
    Turn a client-supplied filename into a path inside `root`.

    Raises ValidationError for an empty name and InvalidPathError when the
    cleaned path would leave `root` or does not name a JPEG.
    """
    name = requested_name or ""
    if not name.strip():
        raise ValidationError("filename is required")

    # Decode once so "..%2F" is judged the same as "../".
    if "%" in name:
        name = unquote(name)
    if "\x00" in name:
        raise InvalidPathError(requested_name, "contains a NUL byte")

    name = name.replace("\\", "/")
    if name.startswith("/"):
        raise InvalidPathError(requested_name, "absolute paths are not allowed")

    root_str = os.path.normpath(str(root))
    candidate = os.path.normpath(os.path.join(root_str, name))

    # to prevent directory traversal attacks
    rel = os.path.relpath(candidate, root_str)
    if rel.split(os.sep)[0] == os.pardir:
        raise InvalidPathError(requested_name, "path escapes the image directory")

    if not candidate.endswith(ACCEPTED_EXTENSIONS):
        raise InvalidPathError(requested_name, "image path does not end with .jpg or .jpeg")

    return Path(candidate)


class FileImageStore:
    """
    Image store backed by one directory.

    Layout:
        root/
            <sha256>.jpg     # uploaded images
            default.jpg      # fallback asset (managed outside the store)
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def put(self, data: bytes) -> str:
        """
        Store an image and return its reference.

        - reference is computed from the bytes
        - if the file already exists, nothing is written (idempotent)
        - otherwise the file is written atomically
        """
        if not data:
            raise ValidationError("image is required")

        reference = image_reference(data)
        path = self.root / reference

        try:
            os.stat(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError("stat", str(path), e) from e
        else:
            # as the file already exists, we can simply return the reference.
            logger.debug("image_deduplicated image_name=%s", reference)
            return reference

        write_atomic(path, data)
        logger.info("image_stored image_name=%s size_bytes=%s", reference, len(data))
        return reference

    def resolve(self, requested_name: str) -> Path:
        path = build_image_path(self.root, requested_name)

        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"image not found: {requested_name}") from e
        except OSError as e:
            raise StorageError("stat", str(path), e) from e

        if not stat.S_ISREG(st.st_mode):
            raise NotFoundError(f"image not found: {requested_name}")
        return path


class InMemoryImageStore:
    """
    Dict-backed image store for tests.

    Names are validated exactly like the filesystem store; resolved paths
    point under `root` but nothing is written to disk.
    """

    def __init__(self, root: Path | str = "images"):
        self.root = Path(root)
        self.blobs: dict[str, bytes] = {}

    def put(self, data: bytes) -> str:
        if not data:
            raise ValidationError("image is required")
        reference = image_reference(data)
        self.blobs.setdefault(reference, bytes(data))
        return reference

    def resolve(self, requested_name: str) -> Path:
        path = build_image_path(self.root, requested_name)
        if path.parent != Path(os.path.normpath(str(self.root))) or path.name not in self.blobs:
            raise NotFoundError(f"image not found: {requested_name}")
        return path
