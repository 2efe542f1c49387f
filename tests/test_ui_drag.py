from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

import config
from ui import RangeBuilderUI


class _Recorder:
    def __init__(self) -> None:
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return lambda *args: self.calls.append((name, args))


def _headless_ui():
    # Tk ウィンドウは作らず、入力ハンドラだけ使う
    ui = RangeBuilderUI.__new__(RangeBuilderUI)
    ui.controller = _Recorder()
    ui._last_drag_cell = None
    return ui


def _at(r, c):
    cell = config.GRID_CELL_PX
    return SimpleNamespace(x=(c + 1) * cell + cell // 2, y=(r + 1) * cell + cell // 2)


def _header():
    return SimpleNamespace(x=config.GRID_CELL_PX // 2, y=config.GRID_CELL_PX // 2)


def test_motion_inside_same_cell_does_not_toggle() -> None:
    ui = _headless_ui()
    ui._on_grid_press(_at(0, 0))
    ui._on_grid_motion(_at(0, 0))
    ui._on_grid_motion(_at(0, 1))
    ui._on_global_release()

    assert ui.controller.calls == [
        ("press_cell", (0, 0)),
        ("enter_cell", (0, 1)),
        ("release", ()),
    ]


def test_leaving_grid_and_returning_to_same_cell_toggles_again() -> None:
    ui = _headless_ui()
    ui._on_grid_press(_at(2, 2))
    ui._on_grid_motion(_header())
    ui._on_grid_motion(_at(2, 2))

    assert ui.controller.calls == [("press_cell", (2, 2)), ("enter_cell", (2, 2))]


def test_motion_without_press_is_ignored() -> None:
    ui = _headless_ui()
    ui._on_grid_motion(_at(1, 1))
    ui._on_global_release()
    assert ui.controller.calls == []
