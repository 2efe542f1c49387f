# image_range_exporter.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

import config
from range_core.models import RangeExportView, contrast_text_color

logger = logging.getLogger("range_builder.export.image")

# suffix -> Pillow format
_FORMATS = {
    ".png": "PNG",
    ".pdf": "PDF",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}

MARGIN = 20
TITLE_H = 36
LEGEND_ROW_H = 22
SWATCH = 15


def _text_size(draw: ImageDraw.ImageDraw, text: str, font) -> tuple[int, int]:
    x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=font)
    return x1 - x0, y1 - y0


def _draw_centered(draw: ImageDraw.ImageDraw, box: tuple[int, int, int, int], text: str, fill: str, font) -> None:
    w, h = _text_size(draw, text, font)
    x0, y0, x1, y1 = box
    draw.text((x0 + (x1 - x0 - w) / 2, y0 + (y1 - y0 - h) / 2), text, fill=fill, font=font)


def render_range_image(view: RangeExportView, cell_px: Optional[int] = None) -> Image.Image:
    """
    レンジ表（タイトル + 13x13 + 凡例）を1枚の画像にする。
    見出し行/列の分だけ 14x14 マス。
    """
    cell = int(cell_px or config.EXPORT_CELL_PX)
    font = ImageFont.load_default()

    n = len(view.rank_labels)
    grid_px = (n + 1) * cell
    title_h = TITLE_H if view.title else 0
    legend_h = LEGEND_ROW_H * 2 if view.legend else 0

    width = grid_px + MARGIN * 2
    height = MARGIN + title_h + grid_px + legend_h + MARGIN
    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)

    y = MARGIN
    if view.title:
        draw.text((MARGIN, y), view.title, fill="black", font=font)
        y += title_h

    top = y
    left = MARGIN

    # 見出し
    for i, label in enumerate(view.rank_labels):
        x0 = left + (i + 1) * cell
        _draw_centered(draw, (x0, top, x0 + cell, top + cell), label, "black", font)
        y0 = top + (i + 1) * cell
        _draw_centered(draw, (left, y0, left + cell, y0 + cell), label, "black", font)

    for r, row in enumerate(view.cells):
        for c, cv in enumerate(row):
            x0 = left + (c + 1) * cell
            y0 = top + (r + 1) * cell
            box = (x0, y0, x0 + cell - 1, y0 + cell - 1)
            draw.rectangle(box, fill=f"#{cv.bg_rgb}", outline="black")
            _draw_centered(draw, box, cv.label, contrast_text_color(cv.bg_rgb), font)

    if view.legend:
        ly = top + grid_px + 6
        draw.text((left, ly), "Tags", fill="black", font=font)
        ly += LEGEND_ROW_H
        x = left
        for entry in view.legend:
            draw.rectangle((x, ly, x + SWATCH, ly + SWATCH), fill=f"#{entry.bg_rgb}", outline="#DDDDDD")
            draw.text((x + SWATCH + 5, ly + 2), entry.name, fill="black", font=font)
            w, _ = _text_size(draw, entry.name, font)
            x += SWATCH + 5 + w + 20

    return img


def export_range_image(view: RangeExportView, path: str | Path, cell_px: Optional[int] = None) -> Path:
    out = Path(path)
    fmt = _FORMATS.get(out.suffix.lower())
    if fmt is None:
        raise ValueError(f"unsupported image format: {out.suffix!r} (use {', '.join(sorted(_FORMATS))})")

    img = render_range_image(view, cell_px=cell_px)
    out.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "PDF":
        img.save(out, fmt, resolution=float(config.EXPORT_PDF_DPI))
    else:
        img.save(out, fmt)

    logger.info("[EXPORT] wrote %s (%s, %dx%d)", out, fmt, img.width, img.height)
    return out
