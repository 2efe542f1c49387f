import pytest

from range_core.library import RangeLibrary
from range_core.storage import GRID_KEY, JsonFileStore, KeyValueStore, MemoryStore, read_json, write_json
from range_core.working_range import WorkingRange


def test_json_file_store_roundtrip(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "data")
    assert store.read(GRID_KEY) is None

    write_json(store, GRID_KEY, {"name": "ボタン"})
    assert (tmp_path / "data" / "pokerRange.json").exists()
    assert read_json(store, GRID_KEY, None) == {"name": "ボタン"}

    store.remove(GRID_KEY)
    assert store.read(GRID_KEY) is None
    store.remove(GRID_KEY)  # 2回目もエラーにしない


def test_read_json_broken_falls_back_to_default(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    (tmp_path / "tagNames.json").write_text("{bad json", encoding="utf-8")
    assert read_json(store, "tagNames", {"x": 1}) == {"x": 1}


@pytest.mark.parametrize("key", ["", "../etc", "a/b", "a.json"])
def test_json_file_store_rejects_bad_keys(tmp_path, key) -> None:
    with pytest.raises(ValueError):
        JsonFileStore(tmp_path).path_for(key)


def test_memory_store() -> None:
    store = MemoryStore({"a": "1"})
    store.write("b", "2")
    store.remove("a")
    assert store.read("a") is None
    assert store.read("b") == "2"


def test_undecodable_file_is_treated_as_missing(tmp_path) -> None:
    (tmp_path / "pokerRange.json").write_bytes(b"\xff\xfe[[garbage")
    store = JsonFileStore(tmp_path)

    assert store.read(GRID_KEY) is None
    assert WorkingRange(store).grid.is_empty()
    assert len(RangeLibrary(store)) == 0


def test_partial_store_cannot_be_constructed() -> None:
    class ReadOnlyStore(KeyValueStore):
        def read(self, key):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStore()
