# range_core/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .handgrid import GRID_SIZE, RANKS, rc_to_hand_key
from .range_grid import RangeGrid
from .tags import TagRegistry

EMPTY_RGB = "FFFFFF"


def contrast_text_color(rgb: str) -> str:
    try:
        r = int(rgb[0:2], 16); g = int(rgb[2:4], 16); b = int(rgb[4:6], 16)
        y = (r * 299 + g * 587 + b * 114) / 1000
        return "black" if y >= 150 else "white"
    except (ValueError, TypeError):
        return "black"


@dataclass(frozen=True)
class RangeCellView:
    label: str              # 表示（例: "AKs" / "AKo" / "AA"）
    bg_rgb: str             # "RRGGBB"（"#"なし）
    tag_id: Optional[str] = None


@dataclass(frozen=True)
class LegendEntry:
    tag_id: str
    name: str
    bg_rgb: str


@dataclass(frozen=True)
class RangeExportView:
    """
    UI/出力先に依存しない「レンジ表の描画内容」。
    画像・PDF・Excel の各 exporter はこれだけを見て描く。
    """
    title: str
    rank_labels: Tuple[str, ...]
    cells: List[List[RangeCellView]]   # 13x13
    legend: List[LegendEntry]
    tagged_count: int

    @property
    def percent_of_hands(self) -> float:
        return self.tagged_count * 100.0 / (GRID_SIZE * GRID_SIZE)


def build_export_view(grid: RangeGrid, registry: TagRegistry, title: str = "") -> RangeExportView:
    cells: List[List[RangeCellView]] = []
    for r in range(GRID_SIZE):
        row: List[RangeCellView] = []
        for c in range(GRID_SIZE):
            tag = grid.get(r, c)
            bg = registry.color_rgb(tag) if tag is not None else EMPTY_RGB
            row.append(RangeCellView(label=rc_to_hand_key(r, c), bg_rgb=bg, tag_id=tag))
        cells.append(row)

    legend = [
        LegendEntry(tag_id=t, name=registry.display_name(t), bg_rgb=registry.color_rgb(t))
        for t in registry.tags()
    ]

    return RangeExportView(
        title=(title or "").strip(),
        rank_labels=tuple(RANKS),
        cells=cells,
        legend=legend,
        tagged_count=grid.count(),
    )
