# range_core/library.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import InvalidNameError, NotFoundError
from .range_grid import RangeGrid
from .storage import KeyValueStore, LIBRARY_KEY, read_json, write_json

logger = logging.getLogger("range_builder.core.library")


@dataclass(frozen=True)
class SavedRange:
    name: str
    grid: RangeGrid


class RangeLibrary:
    """
    名前付きレンジの保存庫（name -> grid snapshot）。
    - 同名 save は上書き（並び順は最初に保存した位置のまま）
    - delete は存在しなくてもエラーにしない
    """

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self._store = store
        self._entries: Dict[str, RangeGrid] = {}
        self.restore()

    def restore(self) -> None:
        self._entries = {}
        if self._store is None:
            return

        data = read_json(self._store, LIBRARY_KEY, None)
        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning("[LIB] %s is not an object, starting empty", LIBRARY_KEY)
            return

        for name, rows in data.items():
            try:
                self._entries[str(name)] = RangeGrid.from_rows(rows)
            except ValueError as e:
                logger.warning("[LIB] skip broken entry %r: %s", name, e)

    def persist(self) -> None:
        if self._store is None:
            return
        write_json(self._store, LIBRARY_KEY, {name: grid.to_rows() for name, grid in self._entries.items()})

    # -------------------------
    # Public
    # -------------------------
    def save(self, name: str, grid: RangeGrid) -> None:
        if not (name or "").strip():
            raise InvalidNameError(name)
        # キーは入力そのまま（trim しない）
        self._entries[name] = grid.snapshot()
        self.persist()
        logger.info("[LIB] saved %r (%d cells)", name, grid.count())

    def load(self, name: str) -> RangeGrid:
        grid = self._entries.get(name)
        if grid is None:
            raise NotFoundError(name)
        return grid.snapshot()

    def delete(self, name: str) -> None:
        if name not in self._entries:
            return
        del self._entries[name]
        self.persist()
        logger.info("[LIB] deleted %r", name)

    def list(self) -> List[SavedRange]:
        return [SavedRange(name=n, grid=g.snapshot()) for n, g in self._entries.items()]

    def names(self) -> List[str]:
        return list(self._entries.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
