# main.py
from __future__ import annotations

import logging
import tkinter as tk

import config
from controller import RangeBuilderController
from range_core.library import RangeLibrary
from range_core.storage import JsonFileStore
from range_core.tags import TagRegistry
from range_core.working_range import WorkingRange
from ui import RangeBuilderUI

logger = logging.getLogger("range_builder.main")


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    store = JsonFileStore(config.DATA_DIR)
    working = WorkingRange(store)
    tags = TagRegistry(store)
    library = RangeLibrary(store)
    logger.info(
        "[MAIN] data=%s grid_cells=%d saved_ranges=%d",
        config.DATA_DIR, working.grid.count(), len(library),
    )

    root = tk.Tk()
    ui = RangeBuilderUI(root)
    controller = RangeBuilderController(ui, working, tags, library, enable_debug=config.ENABLE_DEBUG)
    ui.attach_controller(controller)
    controller.refresh_ui()

    root.mainloop()


if __name__ == "__main__":
    main()
