from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Optional

from postdesk.core.logging import get_structured_logger

CATEGORIES_KEY = "postdesk-categories"

logger = get_structured_logger("postdesk.categories")


class LastCategoryError(ValueError):
    """Raised when removing a category would leave the set empty."""


class KeyValueBackend:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryBackend(KeyValueBackend):
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileBackend(KeyValueBackend):
    """String values stored under string keys in a single JSON object file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            # Treated as empty; the next write replaces the file.
            logger.warning("categories.file_unreadable", extra={"path": str(self.path)})
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise


def _parse_saved(raw: Optional[str]) -> Optional[list[str]]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("categories.unreadable", extra={"raw_length": len(raw)})
        return None
    if not isinstance(data, list):
        return None
    names = [str(item).strip() for item in data if str(item).strip()]
    return names or None


class CategoryStore:
    """
    The author's category list.

    Read once from the backend on construction and written back on every
    change. Always holds at least one category.
    """

    def __init__(self, backend: KeyValueBackend, defaults: Iterable[str], key: str = CATEGORIES_KEY):
        self.backend = backend
        self.key = key
        saved = _parse_saved(backend.get(key))
        self._categories: list[str] = saved or [c for c in defaults if c] or ["General"]

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._categories

    def _persist(self) -> None:
        self.backend.set(self.key, json.dumps(self._categories, ensure_ascii=False))

    def add(self, name: str) -> bool:
        name = (name or "").strip()
        if not name or name in self._categories:
            return False
        self._categories.append(name)
        self._persist()
        return True

    def remove(self, name: str) -> bool:
        if name not in self._categories:
            return False
        if len(self._categories) <= 1:
            raise LastCategoryError("At least one category must remain")
        self._categories = [c for c in self._categories if c != name]
        self._persist()
        return True
