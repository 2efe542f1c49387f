# range_core/working_range.py
from __future__ import annotations

import logging
from typing import Optional

from .range_grid import RangeGrid
from .selection import apply_percentage, clamp_percent
from .storage import GRID_KEY, KeyValueStore, read_json, write_json

logger = logging.getLogger("range_builder.core.working_range")


class WorkingRange:
    """
    編集中のグリッド（1セッションに1つ）。
    変更のたびに store へ書き戻す。
    """

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self._store = store
        self.grid: RangeGrid = RangeGrid.empty()
        self.percent: float = 0.0
        self.restore()

    def restore(self) -> None:
        self.grid = RangeGrid.empty()
        if self._store is None:
            return

        rows = read_json(self._store, GRID_KEY, None)
        if rows is None:
            return
        try:
            self.grid = RangeGrid.from_rows(rows)
        except ValueError as e:
            logger.warning("[GRID] broken %s, starting empty: %s", GRID_KEY, e)

    def persist(self) -> None:
        if self._store is None:
            return
        write_json(self._store, GRID_KEY, self.grid.to_rows())

    # -------------------------
    # Mutations
    # -------------------------
    def toggle_cell(self, row: int, col: int, tag: str) -> RangeGrid:
        self.grid = self.grid.toggle_cell(row, col, tag)
        self.persist()
        return self.grid

    def apply_percentage(self, percent: float, tag: str) -> RangeGrid:
        # 手動で塗った分はここで消える（全置換）
        self.percent = clamp_percent(percent)
        self.grid = apply_percentage(self.percent, tag)
        self.persist()
        return self.grid

    def clear(self) -> RangeGrid:
        self.grid = self.grid.clear()
        if self._store is not None:
            # 空グリッドはキー無しと同じ扱い
            self._store.remove(GRID_KEY)
        return self.grid

    def replace(self, grid: RangeGrid) -> RangeGrid:
        self.grid = grid.snapshot()
        self.persist()
        return self.grid
