# range_core/paint.py
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional, Tuple

logger = logging.getLogger("range_builder.core.paint")

ToggleFn = Callable[[int, int], object]


class PaintState(Enum):
    IDLE = auto()
    PAINTING = auto()


class PaintSession:
    """
    ドラッグ塗りの状態遷移。
      IDLE --press--> PAINTING (toggle)
      PAINTING --enter--> PAINTING (toggle)
      PAINTING --release--> IDLE
    release は grid の外で離された場合も呼ばれる前提（UI側で global bind）。
    """

    def __init__(self, toggle: ToggleFn, enable_debug: bool = False) -> None:
        self._toggle = toggle
        self.enable_debug = bool(enable_debug)
        self.state = PaintState.IDLE
        self.last_cell: Optional[Tuple[int, int]] = None

    def _log(self, msg: str) -> None:
        if self.enable_debug:
            logger.info(msg)

    @property
    def is_painting(self) -> bool:
        return self.state is PaintState.PAINTING

    def on_press(self, row: int, col: int) -> None:
        self.state = PaintState.PAINTING
        self.last_cell = (row, col)
        self._log(f"[PAINT] press {(row, col)}")
        self._toggle(row, col)

    def on_enter(self, row: int, col: int) -> None:
        if not self.is_painting:
            return
        self.last_cell = (row, col)
        self._log(f"[PAINT] enter {(row, col)}")
        self._toggle(row, col)

    def on_release(self) -> None:
        if self.is_painting:
            self._log("[PAINT] release")
        self.state = PaintState.IDLE
        self.last_cell = None
