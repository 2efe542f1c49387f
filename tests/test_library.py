import json

import pytest

from range_core.errors import InvalidNameError, NotFoundError
from range_core.library import RangeLibrary
from range_core.range_grid import RangeGrid
from range_core.storage import LIBRARY_KEY, JsonFileStore, MemoryStore
from range_core.selection import apply_percentage


def test_save_then_load_returns_equal_grid() -> None:
    lib = RangeLibrary()
    grid = apply_percentage(20, "green")
    lib.save("BTN open", grid)
    assert lib.load("BTN open") == grid


def test_saved_grid_is_not_affected_by_later_edits() -> None:
    lib = RangeLibrary()
    grid = RangeGrid.empty().toggle_cell(0, 0, "green")
    lib.save("a", grid)

    edited = lib.load("a").toggle_cell(0, 0, "green")
    assert edited.is_empty()
    assert lib.load("a").get(0, 0) == "green"


@pytest.mark.parametrize("name", ["", "   ", "\t"])
def test_save_rejects_blank_names(name) -> None:
    store = MemoryStore()
    lib = RangeLibrary(store)
    lib.save("BTN", apply_percentage(20, "green"))
    before = [(s.name, s.grid) for s in lib.list()]
    stored = store.read(LIBRARY_KEY)

    with pytest.raises(InvalidNameError):
        lib.save(name, apply_percentage(50, "red"))

    assert [(s.name, s.grid) for s in lib.list()] == before
    assert store.read(LIBRARY_KEY) == stored


def test_save_keeps_name_untrimmed() -> None:
    lib = RangeLibrary()
    lib.save(" UTG ", RangeGrid.empty())
    assert lib.names() == [" UTG "]
    assert "UTG" not in lib


def test_load_missing_raises_not_found() -> None:
    lib = RangeLibrary()
    with pytest.raises(NotFoundError) as ei:
        lib.load("nope")
    assert "nope" in str(ei.value)
    assert isinstance(ei.value, KeyError)


def test_delete_is_noop_for_missing_name() -> None:
    store = MemoryStore()
    lib = RangeLibrary(store)
    lib.delete("nope")
    assert store.read(LIBRARY_KEY) is None


def test_overwrite_keeps_first_insertion_order() -> None:
    lib = RangeLibrary()
    lib.save("a", RangeGrid.empty())
    lib.save("b", RangeGrid.empty())
    lib.save("a", apply_percentage(5, "red"))
    assert lib.names() == ["a", "b"]
    assert [s.name for s in lib.list()] == ["a", "b"]
    assert lib.load("a").count() == 8


def test_persists_through_json_file_store(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    lib = RangeLibrary(store)
    lib.save("CO", apply_percentage(30, "green"))
    lib.save("SB", apply_percentage(10, "red"))
    lib.delete("SB")

    raw = json.loads((tmp_path / "rangeLibrary.json").read_text(encoding="utf-8"))
    assert list(raw) == ["CO"]
    assert len(raw["CO"]) == 13

    again = RangeLibrary(JsonFileStore(tmp_path))
    assert again.names() == ["CO"]
    assert again.load("CO") == apply_percentage(30, "green")


def test_broken_entry_is_skipped_on_restore() -> None:
    good = RangeGrid.empty().toggle_cell(0, 0, "green").to_rows()
    store = MemoryStore({LIBRARY_KEY: json.dumps({"good": good, "bad": [[1, 2]]})})
    lib = RangeLibrary(store)
    assert lib.names() == ["good"]


@pytest.mark.parametrize("raw", ["{bad json", "[]"])
def test_broken_library_starts_empty(raw) -> None:
    lib = RangeLibrary(MemoryStore({LIBRARY_KEY: raw}))
    assert len(lib) == 0
