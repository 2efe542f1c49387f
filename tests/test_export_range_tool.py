import runpy
from pathlib import Path
from types import SimpleNamespace

import config
from range_core.library import RangeLibrary
from range_core.selection import apply_percentage
from range_core.storage import JsonFileStore
from range_core.working_range import WorkingRange


def _load_tool():
    path = Path(__file__).resolve().parents[1] / "tools" / "export_range.py"
    return SimpleNamespace(**runpy.run_path(str(path)))


def _seed(data_dir: Path) -> None:
    store = JsonFileStore(data_dir)
    WorkingRange(store).apply_percentage(10, "green")
    RangeLibrary(store).save("CO", apply_percentage(25, "red"))


def test_list_saved_ranges(tmp_path, capsys) -> None:
    _seed(tmp_path)
    code = _load_tool().main(["--data-dir", str(tmp_path), "--list"])

    out = capsys.readouterr().out
    assert code == 0
    assert "- CO: cells=42" in out


def test_export_working_grid_and_saved_range(tmp_path, capsys) -> None:
    _seed(tmp_path)
    tool = _load_tool()

    assert tool.main(["--data-dir", str(tmp_path), "--out", str(tmp_path / "w.png")]) == 0
    assert (tmp_path / "w.png").exists()
    assert "cells=16" in capsys.readouterr().out

    assert tool.main(["--data-dir", str(tmp_path), "--name", "CO", "--out", str(tmp_path / "co.xlsx")]) == 0
    assert (tmp_path / "co.xlsx").exists()


def test_missing_saved_range_returns_error(tmp_path, capsys) -> None:
    code = _load_tool().main(["--data-dir", str(tmp_path), "--name", "nope", "--out", str(tmp_path / "x.pdf")])
    assert code == 2
    assert "not found" in capsys.readouterr().err


def test_default_output_goes_to_export_dir(tmp_path, monkeypatch, capsys) -> None:
    _seed(tmp_path / "data")
    monkeypatch.setattr(config, "EXPORT_DIR", tmp_path / "exports")

    assert _load_tool().main(["--data-dir", str(tmp_path / "data"), "--name", "CO"]) == 0
    assert (tmp_path / "exports" / "CO.pdf").exists()
    assert "Exported:" in capsys.readouterr().out
