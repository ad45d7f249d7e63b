"""
Item persistence.

Items live in one JSON file, rewritten whole on every insert:

    {"items": [{"name": "...", "category": "...", "image_name": "..."}, ...]}

A bare JSON array of the same objects is accepted on read.

Inserts are read-modify-write with no lock: two concurrent inserts can race
and the later whole-file write wins. Readers never see a partial file because
writes go through a temp file + rename.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from core.errors import DeserializationError, NotFoundError, StorageError
from core.fileio import write_atomic

from .schemas import Item


class ItemRepository(Protocol):
    def insert(self, item: Item) -> None: ...

    def get_all(self) -> list[Item]: ...

    def get(self, position: int) -> Item: ...


def _item_at(items: list[Item], position: int) -> Item:
    # Ordinal lookup: positions are indexes into insertion order.
    if position < 0 or position >= len(items):
        raise NotFoundError(f"item not found: {position}")
    return items[position]


class JsonFileItemRepository:
    def __init__(self, file_name: Path | str):
        self.file_name = Path(file_name)

    def insert(self, item: Item) -> None:
        items = self.get_all()
        items.append(item)

        payload = {"items": [i.model_dump() for i in items]}
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8") + b"\n"
        write_atomic(self.file_name, data)

    def get_all(self) -> list[Item]:
        """
        Return every stored item in insertion order.

        A store that has never been written is an empty list, not an error.
        """
        try:
            raw = self.file_name.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError("read_file", str(self.file_name), e) from e

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DeserializationError(str(self.file_name), f"invalid JSON ({e})") from e

        return self._parse_items(decoded)

    def get(self, position: int) -> Item:
        return _item_at(self.get_all(), position)

    def _parse_items(self, decoded: Any) -> list[Item]:
        if isinstance(decoded, dict):
            records = decoded.get("items")
            # The original writer encoded an empty list as null.
            if records is None:
                records = []
        else:
            records = decoded

        if not isinstance(records, list):
            raise DeserializationError(str(self.file_name), "expected a list of items")

        try:
            return [Item.model_validate(record) for record in records]
        except PydanticValidationError as e:
            raise DeserializationError(str(self.file_name), f"invalid item record ({e.error_count()} errors)") from e


class InMemoryItemRepository:
    def __init__(self, items: list[Item] | None = None):
        self._items: list[Item] = list(items or [])

    def insert(self, item: Item) -> None:
        self._items.append(item)

    def get_all(self) -> list[Item]:
        return list(self._items)

    def get(self, position: int) -> Item:
        return _item_at(self._items, position)
