# excel_range_exporter.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

import config
from range_core.handgrid import GRID_SIZE, rc_to_hand_key
from range_core.models import RangeExportView
from range_core.range_grid import RangeGrid
from range_core.tags import TagRegistry

logger = logging.getLogger("range_builder.export.excel")

# grid layout: 見出し行の下、見出し列の右に 13x13
GRID_TOP_ROW = 3
GRID_LEFT_COL = 2
LEGEND_COL_TAG_ID = 3
ANCHOR_SEARCH_ROWS = 40
ANCHOR_SEARCH_COLS = 40


def _solid(rgb: str) -> PatternFill:
    return PatternFill(fill_type="solid", fgColor=rgb.upper(), bgColor=rgb.upper())


def build_workbook(view: RangeExportView) -> Workbook:
    wb = Workbook()
    ws: Worksheet = wb.active
    ws.title = config.EXCEL_SHEET_NAME

    ws.cell(row=1, column=1, value=view.title or config.DEFAULT_EXPORT_NAME).font = Font(bold=True, size=14)

    center = Alignment(horizontal="center", vertical="center")
    for i, label in enumerate(view.rank_labels):
        h = ws.cell(row=GRID_TOP_ROW - 1, column=GRID_LEFT_COL + i, value=label)
        h.alignment = center
        h.font = Font(bold=True)
        v = ws.cell(row=GRID_TOP_ROW + i, column=GRID_LEFT_COL - 1, value=label)
        v.alignment = center
        v.font = Font(bold=True)

    for r, row in enumerate(view.cells):
        for c, cv in enumerate(row):
            cell = ws.cell(row=GRID_TOP_ROW + r, column=GRID_LEFT_COL + c, value=cv.label)
            cell.alignment = center
            cell.font = Font(size=9)
            # 未選択セルは塗らない（読み戻し時に「無色=未選択」になる）
            if cv.tag_id is not None:
                cell.fill = _solid(cv.bg_rgb)

    for i in range(GRID_SIZE + 1):
        ws.column_dimensions[get_column_letter(GRID_LEFT_COL - 1 + i)].width = 6

    legend_row = GRID_TOP_ROW + GRID_SIZE + 1
    ws.cell(row=legend_row, column=1, value="Tags").font = Font(bold=True)
    for k, entry in enumerate(view.legend, start=1):
        r = legend_row + k
        ws.cell(row=r, column=1).fill = _solid(entry.bg_rgb)
        ws.cell(row=r, column=2, value=entry.name)
        ws.cell(row=r, column=LEGEND_COL_TAG_ID, value=entry.tag_id)

    return wb


def export_range_workbook(view: RangeExportView, path: str | Path) -> Path:
    out = Path(path)
    if out.suffix.lower() != ".xlsx":
        raise ValueError(f"excel export needs .xlsx, got {out.suffix!r}")
    out.parent.mkdir(parents=True, exist_ok=True)
    build_workbook(view).save(out)
    logger.info("[EXPORT] wrote %s", out)
    return out


# =========================
# Read back（色 -> tag）
# =========================

def _read_fill_rgb(cell) -> Optional[str]:
    """
    セルの fill.fgColor から RGB(6桁) を返す。
    取得できない/無効なら None。
    """
    fill = cell.fill
    if fill is None or fill.patternType in (None, "none"):
        return None

    fg = getattr(fill, "fgColor", None)
    if fg is None:
        return None

    # openpyxl は rgb が ARGB("FF112233") で来ることが多い
    if getattr(fg, "type", None) == "rgb" and getattr(fg, "rgb", None):
        return str(fg.rgb).upper()[-6:]
    # theme / indexed はここでは解決しない
    return None


def _find_aa_anchor(ws: Worksheet) -> Tuple[int, int]:
    # 1行目はタイトル（レンジ名が "AA" の場合がある）
    for row in ws.iter_rows(min_row=2, max_row=ANCHOR_SEARCH_ROWS, max_col=ANCHOR_SEARCH_COLS):
        for cell in row:
            if isinstance(cell.value, str) and cell.value.strip().upper() == "AA":
                return cell.row, cell.column
    raise ValueError(f"'AA' anchor not found in sheet {ws.title!r}")


def _legend_colors(ws: Worksheet, aa_row: int) -> Dict[str, str]:
    out: Dict[str, str] = {}
    r = aa_row + GRID_SIZE + 1
    for _ in range(ANCHOR_SEARCH_ROWS):
        r += 1
        tag_id = ws.cell(row=r, column=LEGEND_COL_TAG_ID).value
        if tag_id is None:
            break
        rgb = _read_fill_rgb(ws.cell(row=r, column=1))
        if rgb is not None:
            out.setdefault(rgb, str(tag_id))
    return out


def read_grid_from_workbook(
    path: str | Path,
    registry: TagRegistry,
    sheet_name: Optional[str] = None,
) -> RangeGrid:
    """
    export_range_workbook で書いたシートを RangeGrid に戻す。
    - "AA" セルを 13x13 の左上とみなす
    - 色は凡例（tag_id 列）→ registry の色 の順に照合
    - 無色/不一致は未選択
    """
    wb = openpyxl.load_workbook(Path(path))
    name = sheet_name or config.EXCEL_SHEET_NAME
    if name not in wb.sheetnames:
        raise ValueError(f"Sheet not found: {name}. Available={wb.sheetnames}")
    ws = wb[name]

    aa_row, aa_col = _find_aa_anchor(ws)

    rgb_to_tag = _legend_colors(ws, aa_row)
    for tag_id in registry.tags():
        rgb_to_tag.setdefault(registry.color_rgb(tag_id), tag_id)

    rows = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
    unmatched = 0
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            cell = ws.cell(row=aa_row + r, column=aa_col + c)
            label = str(cell.value or "").strip()
            if label and label.upper() != rc_to_hand_key(r, c).upper():
                raise ValueError(f"unexpected label at {cell.coordinate}: {label!r}")
            rgb = _read_fill_rgb(cell)
            if rgb is None:
                continue
            tag = rgb_to_tag.get(rgb)
            if tag is None:
                unmatched += 1
                continue
            rows[r][c] = tag

    if unmatched:
        logger.warning("[IMPORT] %d colored cells did not match any tag", unmatched)
    return RangeGrid.from_rows(rows)
