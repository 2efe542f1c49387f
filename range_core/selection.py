# range_core/selection.py
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from .handgrid import HandCell, TOTAL_HANDS, hand_ranking
from .range_grid import RangeGrid

MIN_PERCENT = 0.0
MAX_PERCENT = 100.0


def clamp_percent(percent: float) -> float:
    p = float(percent)
    if math.isnan(p) or p < MIN_PERCENT:
        return MIN_PERCENT
    if p > MAX_PERCENT:
        return MAX_PERCENT
    return p


def hands_for_percent(percent: float, total: int = TOTAL_HANDS) -> int:
    """
    floor(percent / 100 * total)
    演算順序は固定（保存済みレンジと同じ枚数になるように）。
      33.3 -> 56, 50.9 -> 86
    """
    p = clamp_percent(percent)
    return math.floor((p / 100) * total)


def threshold_cells(percent: float, ranking: Optional[Sequence[HandCell]] = None) -> Tuple[HandCell, ...]:
    order = tuple(ranking) if ranking is not None else hand_ranking()
    return order[:hands_for_percent(percent, len(order))]


def apply_percentage(percent: float, tag: str, ranking: Optional[Sequence[HandCell]] = None) -> RangeGrid:
    """
    上位 percent% を tag で塗った新しいグリッドを返す。
    手動で塗ったセルは残らない（全置換）。
    """
    return RangeGrid.from_cells({cell: tag for cell in threshold_cells(percent, ranking)})

