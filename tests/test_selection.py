import math

import pytest

from range_core.handgrid import HandCell, hand_ranking
from range_core.selection import apply_percentage, clamp_percent, hands_for_percent, threshold_cells


@pytest.mark.parametrize(
    "percent, expected",
    [
        (0, 0),
        (0.5, 0),
        (0.6, 1),
        (10, 16),
        (33.3, 56),
        (50, 84),
        (50.9, 86),
        (100, 169),
    ],
)
def test_hands_for_percent_uses_floor(percent, expected) -> None:
    assert hands_for_percent(percent) == expected


@pytest.mark.parametrize(
    "percent, expected",
    [(-1, 0.0), (150, 100.0), (float("nan"), 0.0), (42.5, 42.5)],
)
def test_clamp_percent(percent, expected) -> None:
    assert clamp_percent(percent) == expected


def test_apply_percentage_zero_and_full() -> None:
    assert apply_percentage(0, "green").is_empty()

    full = apply_percentage(100, "green")
    assert full.count() == 169
    assert full.counts_by_tag() == {"green": 169}


def test_apply_percentage_takes_ranking_prefix() -> None:
    grid = apply_percentage(33.3, "red")
    assert set(grid.tagged_cells("red")) == set(hand_ranking()[:56])
    # 56番目まで = ペア13 + 43
    assert grid.get(0, 0) == "red"
    assert grid.get(12, 12) == "red"


def test_apply_percentage_out_of_range_is_clamped() -> None:
    assert apply_percentage(-5, "green") == apply_percentage(0, "green")
    assert apply_percentage(250, "green") == apply_percentage(100, "green")


def test_apply_percentage_is_idempotent_and_monotonic() -> None:
    assert apply_percentage(27.4, "yellow") == apply_percentage(27.4, "yellow")

    prev = set()
    for p in range(0, 101, 5):
        cur = set(threshold_cells(p))
        assert prev <= cur
        assert len(cur) == math.floor(p / 100 * 169)
        prev = cur


def test_apply_percentage_with_custom_ranking() -> None:
    ranking = [HandCell(12, 12), HandCell(0, 0)]
    grid = apply_percentage(50, "green", ranking=ranking)
    assert grid.tagged_cells() == [HandCell(12, 12)]
