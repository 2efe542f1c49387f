# controller.py
from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException

import config
from excel_range_exporter import export_range_workbook, read_grid_from_workbook
from image_range_exporter import export_range_image
from range_core.errors import InvalidNameError, NotFoundError
from range_core.library import RangeLibrary
from range_core.models import RangeExportView, build_export_view
from range_core.paint import PaintSession
from range_core.tags import TagRegistry
from range_core.working_range import WorkingRange

logger = logging.getLogger("range_builder.controller")

# Responsibility boundary (must keep):
# - UI: rendering/input only. UI must not touch WorkingRange/Library/Registry directly.
# - Controller: owns the active tag / name field and calls the core.
# - Controller must never manipulate Tk widgets directly; call UI methods via `_ui_call(...)` only.

MSG_NAME_REQUIRED = "Please enter a name for this range"
MSG_SAVED = "Range saved successfully!"


@dataclass
class ControllerState:
    active_tag: str = field(default_factory=lambda: config.DEFAULT_TAG)
    range_name: str = ""
    last_message: str = ""


class RangeBuilderController:
    """
    UI(Tkinter) ⇄ range_core の配線役。

    Controllerの責務：
    - セル操作（press/enter/release）を PaintSession に流す
    - スライダー値を WorkingRange.apply_percentage に流す
    - 保存/読込/削除/タグ名変更/出力 を呼び、結果に従って UI を更新する

    やらないこと：
    - 選択ロジック（= range_core.selection の責務）
    - 永続化（= 各 range_core コンポーネントの責務）
    """

    def __init__(
        self,
        ui,
        working: WorkingRange,
        tags: TagRegistry,
        library: RangeLibrary,
        enable_debug: bool = False,
    ) -> None:
        self.ui = ui
        self.working = working
        self.tags = tags
        self.library = library
        self.enable_debug = bool(enable_debug)
        self.state = ControllerState()
        self.paint = PaintSession(self._toggle_with_active_tag, enable_debug=self.enable_debug)

    # -------------------------
    # Small helpers
    # -------------------------
    def _ui_call(self, name: str, *args, **kwargs):
        fn = getattr(self.ui, name, None)
        if not callable(fn):
            return None
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            logger.warning("[CTRL] ui.%s failed: %s", name, e)
            if self.enable_debug:
                logger.debug("Traceback:\n%s", traceback.format_exc())
            return None

    def _notify(self, kind: str, title: str, message: str) -> None:
        self.state.last_message = message
        self._ui_call(f"show_{kind}", title, message)

    def current_view(self) -> RangeExportView:
        return build_export_view(self.working.grid, self.tags, self.state.range_name)

    # -------------------------
    # Render
    # -------------------------
    def refresh_ui(self) -> None:
        self.render_grid()
        self.render_tags()
        self.render_library()
        self._ui_call("set_percent", self.working.percent)
        self._ui_call("set_range_name", self.state.range_name)

    def render_grid(self) -> None:
        self._ui_call("render_grid", self.current_view())

    def render_tags(self) -> None:
        view = self.current_view()
        self._ui_call("render_tags", view.legend, self.state.active_tag)

    def render_library(self) -> None:
        items = [
            (saved.name, build_export_view(saved.grid, self.tags, saved.name))
            for saved in self.library.list()
        ]
        self._ui_call("render_library", items)

    # -------------------------
    # Tag / name / percent
    # -------------------------
    def select_tag(self, tag_id: str) -> None:
        self.state.active_tag = tag_id
        self.render_tags()

    def rename_tag(self, tag_id: str, new_name: str) -> None:
        self.tags.rename(tag_id, new_name)
        # 入力中の Entry を作り直さない（凡例だけ更新）
        self._ui_call("render_legend", self.current_view().legend)

    def set_range_name(self, name: str) -> None:
        self.state.range_name = name or ""

    def set_percent(self, percent: float) -> None:
        self.working.apply_percentage(percent, self.state.active_tag)
        if self.enable_debug:
            logger.info("[CTRL] percent=%.1f -> %d cells", self.working.percent, self.working.grid.count())
        self._ui_call("set_percent_label", self.working.percent)
        self.render_grid()

    # -------------------------
    # Painting (press -> enter* -> release)
    # -------------------------
    def _toggle_with_active_tag(self, row: int, col: int) -> None:
        self.working.toggle_cell(row, col, self.state.active_tag)
        self.render_grid()

    def press_cell(self, row: int, col: int) -> None:
        self.paint.on_press(row, col)

    def enter_cell(self, row: int, col: int) -> None:
        self.paint.on_enter(row, col)

    def release(self) -> None:
        self.paint.on_release()

    # -------------------------
    # Grid / library
    # -------------------------
    def clear_grid(self) -> None:
        self.working.clear()
        self.render_grid()

    def save_range(self, name: Optional[str] = None) -> bool:
        target = self.state.range_name if name is None else name
        try:
            self.library.save(target, self.working.grid)
        except InvalidNameError:
            self._notify("warning", "Save Range", MSG_NAME_REQUIRED)
            return False

        self.state.range_name = ""
        self._ui_call("set_range_name", "")
        self.render_library()
        self._notify("info", "Save Range", MSG_SAVED)
        return True

    def load_range(self, name: str) -> bool:
        try:
            grid = self.library.load(name)
        except NotFoundError as e:
            logger.warning("[CTRL] load failed: %s", e)
            self._notify("warning", "Load Range", str(e))
            return False

        self.working.replace(grid)
        self.render_grid()
        return True

    def delete_range(self, name: str) -> None:
        self.library.delete(name)
        self.render_library()

    # -------------------------
    # Export / import
    # -------------------------
    def default_export_name(self) -> str:
        base = self.state.range_name.strip() or config.DEFAULT_EXPORT_NAME
        return f"{base}{config.DEFAULT_EXPORT_SUFFIX}"

    def export(self, path: Optional[str | Path] = None) -> Optional[Path]:
        if path is None:
            path = self._ui_call("ask_export_path", self.default_export_name())
            if not path:
                return None

        out = Path(path)
        view = self.current_view()
        try:
            if out.suffix.lower() == ".xlsx":
                written = export_range_workbook(view, out)
            else:
                written = export_range_image(view, out)
        except (OSError, ValueError) as e:
            logger.error("[CTRL] export failed: %s", e, exc_info=True)
            self._notify("error", "Export", f"Export failed:\n{e}")
            return None

        self.state.last_message = f"Exported: {written}"
        return written

    def import_workbook(self, path: Optional[str | Path] = None) -> bool:
        if path is None:
            path = self._ui_call("ask_import_path")
            if not path:
                return False

        try:
            grid = read_grid_from_workbook(path, self.tags)
        except (OSError, ValueError, KeyError, BadZipFile, InvalidFileException) as e:
            logger.error("[CTRL] import failed: %s", e, exc_info=True)
            self._notify("error", "Import", f"Import failed:\n{e}")
            return False

        self.working.replace(grid)
        self.render_grid()
        return True

