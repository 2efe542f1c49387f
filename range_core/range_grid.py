# range_core/range_grid.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .handgrid import GRID_SIZE, HandCell

Cell = Optional[str]
Rows = Tuple[Tuple[Cell, ...], ...]


def _check_rc(row: int, col: int) -> None:
    # 負のインデックスで tuple が後ろから読まれるのを防ぐ
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise IndexError(f"cell out of range: {(row, col)}")


@dataclass(frozen=True)
class RangeGrid:
    """
    13x13 の tag 行列（値オブジェクト）。
    cell は tag_id(str) か None（未選択）。
    変更系メソッドはすべて新しい RangeGrid を返す。
    """
    cells: Rows

    def __post_init__(self) -> None:
        if len(self.cells) != GRID_SIZE or any(len(r) != GRID_SIZE for r in self.cells):
            raise ValueError(f"RangeGrid must be {GRID_SIZE}x{GRID_SIZE}")

    # -------------------------
    # Construction
    # -------------------------
    @classmethod
    def empty(cls) -> RangeGrid:
        return cls(tuple((None,) * GRID_SIZE for _ in range(GRID_SIZE)))

    @classmethod
    def from_rows(cls, rows: Any) -> RangeGrid:
        """
        JSON 由来の入れ子リストから作る。形や型がおかしければ ValueError。
        """
        if not isinstance(rows, (list, tuple)) or len(rows) != GRID_SIZE:
            raise ValueError("grid rows must be a list of 13 rows")

        out: List[Tuple[Cell, ...]] = []
        for r, row in enumerate(rows):
            if not isinstance(row, (list, tuple)) or len(row) != GRID_SIZE:
                raise ValueError(f"grid row {r} must have 13 cells")
            for c, v in enumerate(row):
                if v is not None and not isinstance(v, str):
                    raise ValueError(f"grid cell {(r, c)} must be str or null, got {type(v).__name__}")
            out.append(tuple(row))
        return cls(tuple(out))

    @classmethod
    def from_cells(cls, tagged: Dict[HandCell, str]) -> RangeGrid:
        rows = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
        for cell, tag in tagged.items():
            _check_rc(cell.row, cell.col)
            rows[cell.row][cell.col] = tag
        return cls.from_rows(rows)

    def to_rows(self) -> List[List[Cell]]:
        return [list(r) for r in self.cells]

    # -------------------------
    # Edit operations
    # -------------------------
    def get(self, row: int, col: int) -> Cell:
        _check_rc(row, col)
        return self.cells[row][col]

    def with_cell(self, row: int, col: int, tag: Cell) -> RangeGrid:
        _check_rc(row, col)
        new_row = self.cells[row][:col] + (tag,) + self.cells[row][col + 1:]
        return RangeGrid(self.cells[:row] + (new_row,) + self.cells[row + 1:])

    def toggle_cell(self, row: int, col: int, tag: str) -> RangeGrid:
        """同じ tag なら外す、それ以外（空/別tag）は tag で上書き。"""
        current = self.get(row, col)
        return self.with_cell(row, col, None if current == tag else tag)

    def clear(self) -> RangeGrid:
        return RangeGrid.empty()

    def snapshot(self) -> RangeGrid:
        return RangeGrid(tuple(tuple(r) for r in self.cells))

    # -------------------------
    # Queries
    # -------------------------
    def tagged_cells(self, tag: Optional[str] = None) -> List[HandCell]:
        return [
            HandCell(r, c)
            for r in range(GRID_SIZE)
            for c in range(GRID_SIZE)
            if self.cells[r][c] is not None and (tag is None or self.cells[r][c] == tag)
        ]

    def count(self, tag: Optional[str] = None) -> int:
        return len(self.tagged_cells(tag))

    def counts_by_tag(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for row in self.cells:
            for v in row:
                if v is not None:
                    out[v] = out.get(v, 0) + 1
        return out

    def is_empty(self) -> bool:
        return all(v is None for row in self.cells for v in row)
