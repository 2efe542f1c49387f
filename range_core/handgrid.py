# range_core/handgrid.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

RANKS = "AKQJT98765432"
GRID_SIZE = len(RANKS)
TOTAL_HANDS = GRID_SIZE * GRID_SIZE  # 169

PAIR = "pair"
SUITED = "suited"
OFFSUIT = "offsuit"

_COMBOS = {PAIR: 6, SUITED: 4, OFFSUIT: 12}


def _idx(r: str) -> int:
    r = r.upper()
    if r == "10":
        r = "T"
    if len(r) != 1 or r not in RANKS:
        raise ValueError(f"bad rank: {r}")
    return RANKS.index(r)


def rank_label(i: int) -> str:
    if not (0 <= i < GRID_SIZE):
        raise ValueError(f"rank out of range: {i}")
    return RANKS[i]


@dataclass(frozen=True)
class HandCell:
    """
    13x13 グリッド上の1マス = 1つのハンドカテゴリ。
    - row == col: pair
    - row <  col: offsuit (row, col)
    - row >  col: suited  (col, row)
    """
    row: int
    col: int

    @property
    def kind(self) -> str:
        if self.row == self.col:
            return PAIR
        return OFFSUIT if self.row < self.col else SUITED

    @property
    def combos(self) -> int:
        return _COMBOS[self.kind]

    @property
    def hand_key(self) -> str:
        return rc_to_hand_key(self.row, self.col)


def hand_key_to_rc(hand_key: str) -> tuple[int, int]:
    """
    0-based (row, col) in 13x13.
    - Pair: "AA" -> (A,A) diagonal
    - Offsuit: "AKo" -> upper triangle (row < col)
    - Suited: "AKs" -> lower triangle (row > col)
    """
    hk = (hand_key or "").strip().upper()

    if len(hk) == 2:
        if hk[0] != hk[1]:
            raise ValueError(f"pair must be like AA: {hand_key}")
        i = _idx(hk[0])
        return (i, i)

    if len(hk) != 3:
        raise ValueError(f"bad hand_key: {hand_key}")

    r1, r2, t = hk[0], hk[1], hk[2]
    i1, i2 = _idx(r1), _idx(r2)
    if i1 == i2:
        raise ValueError(f"pair must be 2 chars: {hand_key}")

    hi = min(i1, i2)
    lo = max(i1, i2)

    if t == "O":
        return (hi, lo)  # upper
    if t == "S":
        return (lo, hi)  # lower
    raise ValueError(f"bad suitedness (S/O): {hand_key}")


def rc_to_hand_key(r: int, c: int) -> str:
    if not (0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE):
        raise ValueError(f"rc out of range: {(r, c)}")

    if r == c:
        rr = RANKS[r]
        return rr + rr

    hi = min(r, c)
    lo = max(r, c)
    r1, r2 = RANKS[hi], RANKS[lo]
    return f"{r1}{r2}{'o' if r < c else 's'}"


def all_cells() -> Tuple[HandCell, ...]:
    """Row-major order (display order, not strength order)."""
    return tuple(HandCell(r, c) for r in range(GRID_SIZE) for c in range(GRID_SIZE))


@lru_cache(maxsize=None)
def hand_ranking() -> Tuple[HandCell, ...]:
    """
    Strongest -> weakest by convention (no equity involved):
      1) pairs AA..22
      2) for each rank pair i<j: suited (j,i) then offsuit (i,j)
    Computed once; every call returns the same tuple.
    """
    rankings: list[HandCell] = [HandCell(i, i) for i in range(GRID_SIZE)]

    for i in range(GRID_SIZE - 1):
        for j in range(i + 1, GRID_SIZE):
            rankings.append(HandCell(j, i))  # suited
            rankings.append(HandCell(i, j))  # offsuit

    return tuple(rankings)
