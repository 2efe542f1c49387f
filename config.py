# config.py
from __future__ import annotations

import logging
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = (BASE_DIR / "data").resolve()
EXPORT_DIR = (BASE_DIR / "exports").resolve()


"""
Range Builder 設定

用語メモ（注釈）
- tag: セルに付ける色カテゴリ（"green" / "red" / "yellow"）。tag_id は CSS 色名を兼ねる
- working grid: 編集中の 13x13（data/pokerRange.json）
- library: 名前付きで保存したレンジ（data/rangeLibrary.json）
"""

# =========================
# Logging
# =========================
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ENABLE_DEBUG = False

# =========================
# Editing
# =========================
DEFAULT_TAG = "green"

# スライダー（0..100 を 0.1 刻み）
PERCENT_MIN = 0.0
PERCENT_MAX = 100.0
PERCENT_STEP = 0.1

# =========================
# Grid Layout (Tk)
# =========================
GRID_CELL_PX = 34
GRID_CELL_FONT_SIZE = 8
MINI_CELL_PX = 5          # 保存済みレンジのプレビュー
EMPTY_CELL_RGB = "FFFFFF"

# =========================
# Export
# =========================
DEFAULT_EXPORT_NAME = "poker-range"
DEFAULT_EXPORT_SUFFIX = ".pdf"
EXPORT_CELL_PX = 30
EXPORT_PDF_DPI = 96
EXCEL_SHEET_NAME = "Range"
