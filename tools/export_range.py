from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

# Allow direct execution: `python tools/export_range.py`
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import config
from excel_range_exporter import export_range_workbook
from image_range_exporter import export_range_image
from range_core.errors import NotFoundError
from range_core.handgrid import TOTAL_HANDS
from range_core.library import RangeLibrary
from range_core.models import build_export_view
from range_core.storage import JsonFileStore
from range_core.tags import TagRegistry
from range_core.working_range import WorkingRange


def _print_library(library: RangeLibrary) -> None:
    print("Saved ranges")
    saved = library.list()
    if saved:
        for item in saved:
            pct = item.grid.count() * 100.0 / TOTAL_HANDS
            print(f"- {item.name}: cells={item.grid.count()} ({pct:.1f}%)")
    else:
        print("- (none)")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export the working range or a saved range to PDF/PNG/XLSX.")
    parser.add_argument("--data-dir", type=Path, default=config.DATA_DIR, help="Directory holding pokerRange.json etc.")
    parser.add_argument("--name", default=None, help="Saved range name (default: working grid)")
    parser.add_argument("--out", type=Path, default=None, help="Output path (.pdf/.png/.jpg/.xlsx)")
    parser.add_argument("--list", action="store_true", help="List saved ranges and exit")
    args = parser.parse_args(argv)

    store = JsonFileStore(args.data_dir)
    tags = TagRegistry(store)
    library = RangeLibrary(store)

    if args.list:
        _print_library(library)
        return 0

    if args.name is None:
        grid = WorkingRange(store).grid
        title = ""
    else:
        try:
            grid = library.load(args.name)
        except NotFoundError as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 2
        title = args.name

    out = args.out
    if out is None:
        base = title.strip() or config.DEFAULT_EXPORT_NAME
        out = config.EXPORT_DIR / f"{base}{config.DEFAULT_EXPORT_SUFFIX}"

    view = build_export_view(grid, tags, title)
    try:
        if out.suffix.lower() == ".xlsx":
            written = export_range_workbook(view, out)
        else:
            written = export_range_image(view, out)
    except (OSError, ValueError) as e:
        print(f"[ERROR] export failed: {e}", file=sys.stderr)
        return 1

    print(f"Exported: {written} (cells={view.tagged_count}, {view.percent_of_hands:.1f}%)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
