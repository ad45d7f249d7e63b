"""
Environment-driven settings.

Every value is read at call time so tests (and operators) can override it with
plain environment variables:

- IMAGE_DIR: directory holding uploaded images and `default.jpg`
- ITEMS_FILE: JSON file holding the item list
- DEFAULT_IMAGE_NAME: fallback image served when a requested one is absent
- FRONT_URL: origin allowed by CORS
- MAX_UPLOAD_BYTES: maximum accepted image upload size
- LOG_LEVEL: root log level
- PORT: port used when the app is started as a script
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_IMAGE_DIR = "images"
DEFAULT_ITEMS_FILE = "items.json"
DEFAULT_IMAGE_NAME = "default.jpg"
DEFAULT_FRONT_URL = "http://localhost:3000"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PORT = 9000


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def image_dir() -> Path:
    return Path(_env_str("IMAGE_DIR", DEFAULT_IMAGE_DIR))


def items_file() -> Path:
    return Path(_env_str("ITEMS_FILE", DEFAULT_ITEMS_FILE))


def default_image_path() -> Path:
    return image_dir() / _env_str("DEFAULT_IMAGE_NAME", DEFAULT_IMAGE_NAME)


def front_url() -> str:
    return _env_str("FRONT_URL", DEFAULT_FRONT_URL)


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    if value <= 0:
        return DEFAULT_MAX_UPLOAD_BYTES
    return value


def log_level() -> str:
    return _env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)
