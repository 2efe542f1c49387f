# range_core/storage.py
from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("range_builder.core.storage")

# 保存キー（既存データと互換）
GRID_KEY = "pokerRange"
LIBRARY_KEY = "rangeLibrary"
TAG_NAMES_KEY = "tagNames"

_KEY_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


class KeyValueStore(ABC):
    """
    永続化の最小契約（key -> 文字列）。
    値の中身（JSON）は呼び出し側が決める。
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    data_dir/<key>.json に1キー1ファイルで保存する。
    ディレクトリは最初の write で作る（読み取りだけなら作らない）。
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key or ""):
            raise ValueError(f"bad storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("[STORE] read failed key=%s path=%s: %s", key, path, e)
            return None

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()


def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    raw = store.read(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("[STORE] broken json under key=%s, using default: %s", key, e)
        return default


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.write(key, json.dumps(value, ensure_ascii=False))
