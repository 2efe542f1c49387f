import json

from range_core.range_grid import RangeGrid
from range_core.storage import GRID_KEY, MemoryStore
from range_core.working_range import WorkingRange


def test_every_mutation_is_persisted() -> None:
    store = MemoryStore()
    working = WorkingRange(store)

    working.toggle_cell(0, 0, "green")
    assert json.loads(store.read(GRID_KEY))[0][0] == "green"

    working.apply_percentage(10, "red")
    rows = json.loads(store.read(GRID_KEY))
    assert sum(v == "red" for row in rows for v in row) == 16

    assert WorkingRange(store).grid == working.grid


def test_apply_percentage_replaces_manual_edits() -> None:
    working = WorkingRange()
    working.toggle_cell(12, 0, "yellow")  # A2s は 1% では入らない
    working.apply_percentage(1, "green")
    assert working.grid.get(12, 0) is None
    assert working.grid.counts_by_tag() == {"green": 1}


def test_percent_is_clamped() -> None:
    working = WorkingRange()
    working.apply_percentage(120, "green")
    assert working.percent == 100.0
    assert working.grid.count() == 169


def test_clear_removes_stored_grid() -> None:
    store = MemoryStore()
    working = WorkingRange(store)
    working.toggle_cell(0, 0, "green")
    working.clear()
    assert working.grid.is_empty()
    assert store.read(GRID_KEY) is None


def test_broken_stored_grid_starts_empty() -> None:
    store = MemoryStore({GRID_KEY: json.dumps([[None] * 13])})
    assert WorkingRange(store).grid.is_empty()


def test_replace_takes_a_copy() -> None:
    working = WorkingRange(MemoryStore())
    grid = RangeGrid.empty().toggle_cell(2, 3, "red")
    working.replace(grid)
    assert working.grid == grid
