# ui.py
from __future__ import annotations

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Any, Dict, List, Optional, Tuple

import config
from range_core.handgrid import GRID_SIZE, RANKS
from range_core.models import LegendEntry, RangeExportView, contrast_text_color

logger = logging.getLogger("range_builder.ui")

# ドラッグ中にポインタがグリッド外にいる
_OUTSIDE = (-1, -1)


class RangeBuilderUI:
    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Poker Range Builder")

        # 依存注入されるもの（main.pyでセット）
        self.controller: Optional[Any] = None

        # canvas item ids: (r, c) -> (rect_id, text_id)
        self._cell_items: Dict[Tuple[int, int], Tuple[int, int]] = {}
        self._last_drag_cell: Optional[Tuple[int, int]] = None
        self._slider_value: Optional[float] = None
        self._tag_name_vars: Dict[str, tk.StringVar] = {}

        cell = config.GRID_CELL_PX

        # -------------------------
        # UI
        # -------------------------
        left = tk.Frame(root)
        left.pack(side=tk.LEFT, padx=10, pady=10, anchor="n")

        right = tk.Frame(root)
        right.pack(side=tk.LEFT, padx=10, pady=10, anchor="n", fill=tk.Y)

        # --- 名前 + ボタン ---
        top = tk.Frame(left)
        top.pack(fill=tk.X, pady=(0, 10))

        self.var_name = tk.StringVar(value="")
        self.var_name.trace_add("write", lambda *_: self._on_name_changed())
        tk.Entry(top, textvariable=self.var_name, width=28).pack(side=tk.LEFT, padx=(0, 6))

        tk.Button(top, text="Save Range", bg="#4CAF50", fg="white", command=self.on_save).pack(side=tk.LEFT, padx=3)
        tk.Button(top, text="Clear Grid", bg="#f44336", fg="white", command=self.on_clear).pack(side=tk.LEFT, padx=3)
        tk.Button(top, text="Export", bg="#2196F3", fg="white", command=self.on_export).pack(side=tk.LEFT, padx=3)
        tk.Button(top, text="Import", command=self.on_import).pack(side=tk.LEFT, padx=3)

        # --- 13x13 グリッド（見出し込みで 14x14） ---
        grid_px = (GRID_SIZE + 1) * cell
        self.canvas = tk.Canvas(left, width=grid_px, height=grid_px, highlightthickness=0, bg="white")
        self.canvas.pack()
        self._draw_grid_skeleton()

        self.canvas.bind("<ButtonPress-1>", self._on_grid_press)
        self.canvas.bind("<B1-Motion>", self._on_grid_motion)
        # grid の外で離しても塗りを終わらせる
        self.root.bind_all("<ButtonRelease-1>", self._on_global_release, add="+")

        # --- 凡例 ---
        self.legend_frame = tk.Frame(left)
        self.legend_frame.pack(fill=tk.X, pady=(10, 0))

        # --- スライダー ---
        slider_row = tk.Frame(left)
        slider_row.pack(fill=tk.X, pady=(16, 0))

        self.scale = tk.Scale(
            slider_row,
            from_=config.PERCENT_MIN,
            to=config.PERCENT_MAX,
            resolution=config.PERCENT_STEP,
            orient=tk.HORIZONTAL,
            showvalue=False,
            length=220,
            command=self._on_slider,
        )
        self.scale.pack(side=tk.LEFT)
        self.lbl_percent = tk.Label(slider_row, text=self._percent_text(0.0))
        self.lbl_percent.pack(side=tk.LEFT, padx=10)

        # --- Tags ---
        tags_box = ttk.LabelFrame(right, text="Tags")
        tags_box.pack(fill=tk.X, pady=(0, 16))
        self.tags_frame = tk.Frame(tags_box)
        self.tags_frame.pack(fill=tk.X, padx=10, pady=10)

        # --- Saved Ranges ---
        lib_box = ttk.LabelFrame(right, text="Saved Ranges")
        lib_box.pack(fill=tk.BOTH, expand=True)
        self.library_frame = tk.Frame(lib_box)
        self.library_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

    # -------------------------
    # 依存性注入（main.pyから呼ぶ）
    # -------------------------
    def attach_controller(self, controller: Any) -> None:
        self.controller = controller

    # -------------------------
    # Tk call safe wrapper（例外安全化）
    # -------------------------
    def _tk_call(self, where: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except tk.TclError as e:
            logger.debug("[UI] %s (ignored TclError): %s", where, e)
            return None

    def _ctrl(self, name: str, *args) -> None:
        if self.controller is None:
            logger.error("[UI] controller not attached (%s)", name)
            return
        getattr(self.controller, name)(*args)

    @staticmethod
    def _percent_text(percent: float) -> str:
        return f"{percent:.1f}% of hands"

    # -------------------------
    # Grid drawing
    # -------------------------
    def _draw_grid_skeleton(self) -> None:
        cell = config.GRID_CELL_PX
        font = ("", config.GRID_CELL_FONT_SIZE)

        for i, label in enumerate(RANKS):
            x = (i + 1) * cell + cell / 2
            self.canvas.create_text(x, cell / 2, text=label, font=("", 10, "bold"))
            self.canvas.create_text(cell / 2, x, text=label, font=("", 10, "bold"))

        for r in range(GRID_SIZE):
            for c in range(GRID_SIZE):
                x0 = (c + 1) * cell
                y0 = (r + 1) * cell
                rect = self.canvas.create_rectangle(
                    x0, y0, x0 + cell, y0 + cell,
                    fill=f"#{config.EMPTY_CELL_RGB}", outline="black",
                )
                text = self.canvas.create_text(x0 + cell / 2, y0 + cell / 2, text="", font=font)
                self._cell_items[(r, c)] = (rect, text)

    def _cell_at(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        cell = config.GRID_CELL_PX
        c = int(x // cell) - 1
        r = int(y // cell) - 1
        if 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE:
            return (r, c)
        return None

    # -------------------------
    # Input -> Controller
    # -------------------------
    def _on_grid_press(self, event) -> None:
        rc = self._cell_at(event.x, event.y)
        if rc is None:
            return
        self._last_drag_cell = rc
        self._ctrl("press_cell", *rc)

    def _on_grid_motion(self, event) -> None:
        if self._last_drag_cell is None:
            return
        rc = self._cell_at(event.x, event.y)
        if rc is None:
            # 外に出てから同じセルに戻ったら、もう一度「入った」扱い
            self._last_drag_cell = _OUTSIDE
            return
        # 同じセル内の移動では塗らない（セルに「入った」時だけ）
        if rc == self._last_drag_cell:
            return
        self._last_drag_cell = rc
        self._ctrl("enter_cell", *rc)

    def _on_global_release(self, _event=None) -> None:
        if self._last_drag_cell is None:
            return
        self._last_drag_cell = None
        self._ctrl("release")

    def _on_slider(self, value: str) -> None:
        v = float(value)
        # set_percent() 経由の反映では塗り直さない
        if self._slider_value is not None and abs(v - self._slider_value) < 1e-9:
            self._slider_value = None
            return
        self._slider_value = None
        self._ctrl("set_percent", v)

    def _on_name_changed(self) -> None:
        self._ctrl("set_range_name", self.var_name.get())

    def on_save(self) -> None:
        self._ctrl("save_range")

    def on_clear(self) -> None:
        self._ctrl("clear_grid")

    def on_export(self) -> None:
        self._ctrl("export")

    def on_import(self) -> None:
        self._ctrl("import_workbook")

    # -------------------------
    # Controller -> UI
    # -------------------------
    def render_grid(self, view: RangeExportView) -> None:
        for r, row in enumerate(view.cells):
            for c, cv in enumerate(row):
                rect, text = self._cell_items[(r, c)]
                self._tk_call("cell fill", self.canvas.itemconfigure, rect, fill=f"#{cv.bg_rgb}")
                self._tk_call(
                    "cell text", self.canvas.itemconfigure, text,
                    text=cv.label, fill=contrast_text_color(cv.bg_rgb),
                )
        self.render_legend(view.legend)

    def render_legend(self, legend: List[LegendEntry]) -> None:
        for w in self.legend_frame.winfo_children():
            w.destroy()

        tk.Label(self.legend_frame, text="Tags", font=("", 11, "bold")).pack(side=tk.LEFT, padx=(0, 10))
        for entry in legend:
            tk.Label(self.legend_frame, width=2, bg=f"#{entry.bg_rgb}", relief=tk.SOLID, bd=1).pack(side=tk.LEFT)
            tk.Label(self.legend_frame, text=entry.name).pack(side=tk.LEFT, padx=(4, 14))

    def render_tags(self, legend: List[LegendEntry], active_tag: str) -> None:
        for w in self.tags_frame.winfo_children():
            w.destroy()
        self._tag_name_vars = {}

        for i, entry in enumerate(legend):
            is_active = entry.tag_id == active_tag
            tk.Button(
                self.tags_frame,
                bg=f"#{entry.bg_rgb}",
                activebackground=f"#{entry.bg_rgb}",
                width=2,
                relief=tk.SUNKEN if is_active else tk.RAISED,
                bd=3 if is_active else 1,
                command=lambda t=entry.tag_id: self._ctrl("select_tag", t),
            ).grid(row=i, column=0, padx=(0, 10), pady=4)

            var = tk.StringVar(value=entry.name)
            var.trace_add("write", lambda *_, t=entry.tag_id, v=var: self._ctrl("rename_tag", t, v.get()))
            tk.Entry(self.tags_frame, textvariable=var, width=14).grid(row=i, column=1, sticky="w")
            self._tag_name_vars[entry.tag_id] = var

    def render_library(self, items: List[Tuple[str, RangeExportView]]) -> None:
        for w in self.library_frame.winfo_children():
            w.destroy()

        if not items:
            tk.Label(self.library_frame, text="(no saved ranges)", fg="#888888").pack(anchor="w")
            return

        for name, view in items:
            card = tk.Frame(self.library_frame, bd=1, relief=tk.SOLID, padx=8, pady=6)
            card.pack(fill=tk.X, pady=5)

            head = tk.Frame(card)
            head.pack(fill=tk.X)
            tk.Label(head, text=name, font=("", 10, "bold")).pack(side=tk.LEFT)
            tk.Button(
                head, text="Delete", bg="#f44336", fg="white",
                command=lambda n=name: self._ctrl("delete_range", n),
            ).pack(side=tk.RIGHT, padx=(4, 0))
            tk.Button(
                head, text="Load", bg="#2196F3", fg="white",
                command=lambda n=name: self._ctrl("load_range", n),
            ).pack(side=tk.RIGHT)

            self._draw_mini_preview(card, view)

    def _draw_mini_preview(self, parent: tk.Widget, view: RangeExportView) -> None:
        px = config.MINI_CELL_PX
        size = GRID_SIZE * (px + 1) + 1
        mini = tk.Canvas(parent, width=size, height=size, highlightthickness=0, bg="#eeeeee")
        mini.pack(anchor="w", pady=(6, 0))
        for r, row in enumerate(view.cells):
            for c, cv in enumerate(row):
                x0 = 1 + c * (px + 1)
                y0 = 1 + r * (px + 1)
                mini.create_rectangle(x0, y0, x0 + px, y0 + px, fill=f"#{cv.bg_rgb}", width=0)

    def set_percent(self, percent: float) -> None:
        self._slider_value = float(percent)
        self._tk_call("scale set", self.scale.set, percent)
        # 値が変わらず command が来なかった場合のガード解除
        self._tk_call("scale guard", self.root.after_idle, self._clear_slider_guard)
        self.set_percent_label(percent)

    def _clear_slider_guard(self) -> None:
        self._slider_value = None

    def set_percent_label(self, percent: float) -> None:
        self._tk_call("percent label", self.lbl_percent.configure, text=self._percent_text(percent))

    def set_range_name(self, name: str) -> None:
        if self.var_name.get() != name:
            self.var_name.set(name)

    def show_info(self, title: str, message: str) -> None:
        messagebox.showinfo(title, message)

    def show_warning(self, title: str, message: str) -> None:
        messagebox.showwarning(title, message)

    def show_error(self, title: str, message: str) -> None:
        messagebox.showerror(title, message)

    def ask_export_path(self, default_name: str) -> str:
        return filedialog.asksaveasfilename(
            title="Export range",
            initialdir=str(config.EXPORT_DIR),
            initialfile=default_name,
            defaultextension=config.DEFAULT_EXPORT_SUFFIX,
            filetypes=[("PDF", "*.pdf"), ("PNG", "*.png"), ("Excel", "*.xlsx")],
        )

    def ask_import_path(self) -> str:
        return filedialog.askopenfilename(
            title="Import range",
            initialdir=str(config.EXPORT_DIR),
            filetypes=[("Excel", "*.xlsx")],
        )
