import pytest

from range_core.handgrid import HandCell
from range_core.range_grid import RangeGrid


def test_empty_grid() -> None:
    grid = RangeGrid.empty()
    assert grid.is_empty()
    assert grid.count() == 0
    assert grid.to_rows() == [[None] * 13 for _ in range(13)]


def test_toggle_sets_then_clears_same_tag() -> None:
    grid = RangeGrid.empty()
    once = grid.toggle_cell(1, 0, "green")
    assert once.get(1, 0) == "green"
    assert grid.get(1, 0) is None  # 元は変わらない

    twice = once.toggle_cell(1, 0, "green")
    assert twice == grid


def test_toggle_with_other_tag_overwrites() -> None:
    grid = RangeGrid.empty().toggle_cell(0, 0, "green").toggle_cell(0, 0, "red")
    assert grid.get(0, 0) == "red"
    assert grid.counts_by_tag() == {"red": 1}


@pytest.mark.parametrize("rc", [(-1, 0), (0, -1), (13, 0), (0, 13)])
def test_out_of_range_cell_raises_index_error(rc) -> None:
    with pytest.raises(IndexError):
        RangeGrid.empty().toggle_cell(*rc, "green")


def test_clear_returns_empty_grid() -> None:
    grid = RangeGrid.empty().toggle_cell(2, 2, "yellow").toggle_cell(5, 1, "red")
    assert grid.clear().is_empty()


def test_queries() -> None:
    grid = (
        RangeGrid.empty()
        .toggle_cell(0, 0, "green")
        .toggle_cell(0, 1, "green")
        .toggle_cell(1, 0, "red")
    )
    assert grid.count() == 3
    assert grid.count("green") == 2
    assert grid.tagged_cells("red") == [HandCell(1, 0)]
    assert grid.counts_by_tag() == {"green": 2, "red": 1}


def test_from_rows_roundtrip_via_to_rows() -> None:
    grid = RangeGrid.empty().toggle_cell(3, 7, "green")
    assert RangeGrid.from_rows(grid.to_rows()) == grid


@pytest.mark.parametrize(
    "rows",
    [
        None,
        "not a grid",
        [[None] * 13 for _ in range(12)],
        [[None] * 12 for _ in range(13)],
        [[None] * 13 for _ in range(12)] + [[None] * 12 + [5]],
    ],
)
def test_from_rows_rejects_bad_shapes_and_values(rows) -> None:
    with pytest.raises(ValueError):
        RangeGrid.from_rows(rows)


def test_snapshot_is_independent_value() -> None:
    grid = RangeGrid.empty().toggle_cell(4, 4, "green")
    snap = grid.snapshot()
    assert snap == grid
    assert snap.toggle_cell(4, 4, "green") != grid
