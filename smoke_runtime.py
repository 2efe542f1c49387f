from __future__ import annotations

import argparse
import math
import random
from typing import List

from controller import RangeBuilderController
from range_core.handgrid import GRID_SIZE, TOTAL_HANDS, hand_ranking
from range_core.library import RangeLibrary
from range_core.storage import MemoryStore
from range_core.tags import BUILTIN_TAGS, TagRegistry
from range_core.working_range import WorkingRange


def _check_percentage(ctrl: RangeBuilderController, percent: float) -> None:
    ctrl.set_percent(percent)
    grid = ctrl.working.grid
    expected = math.floor((ctrl.working.percent / 100) * TOTAL_HANDS)
    if grid.count() != expected:
        raise RuntimeError(f"percent={percent} count={grid.count()} expected={expected}")

    prefix = set(hand_ranking()[:expected])
    if set(grid.tagged_cells()) != prefix:
        raise RuntimeError(f"percent={percent} selection is not a ranking prefix")
    if set(grid.counts_by_tag()) - {ctrl.state.active_tag}:
        raise RuntimeError(f"percent={percent} foreign tag in grid: {grid.counts_by_tag()}")


def _check_toggle_inverse(ctrl: RangeBuilderController, rng: random.Random) -> None:
    r, c = rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE)
    tag = ctrl.state.active_tag
    before = ctrl.working.grid
    ctrl.press_cell(r, c)
    ctrl.release()
    ctrl.press_cell(r, c)
    ctrl.release()

    if before.get(r, c) in (None, tag):
        if ctrl.working.grid != before:
            raise RuntimeError(f"toggle twice at {(r, c)} did not restore the grid")
        return

    # 別 tag のセル: 1回目で上書き、2回目で外れる
    if ctrl.working.grid != before.with_cell(r, c, None):
        raise RuntimeError(f"toggle twice at foreign-tag cell {(r, c)} did not clear it")


def _check_library(ctrl: RangeBuilderController, name: str) -> None:
    saved = ctrl.working.grid
    if not ctrl.save_range(name):
        raise RuntimeError(f"save failed name={name!r}")

    ctrl.clear_grid()
    if not ctrl.load_range(name):
        raise RuntimeError(f"load failed name={name!r}")
    if ctrl.working.grid != saved:
        raise RuntimeError(f"load returned a different grid name={name!r}")

    # 読込後の編集は保存済みに波及しない
    ctrl.press_cell(0, 0)
    ctrl.release()
    if ctrl.library.load(name) != saved:
        raise RuntimeError(f"library entry changed by later edit name={name!r}")


def _check_reload(store: MemoryStore, ctrl: RangeBuilderController) -> None:
    working = WorkingRange(store)
    library = RangeLibrary(store)
    tags = TagRegistry(store)
    if working.grid != ctrl.working.grid:
        raise RuntimeError("working grid did not survive reload")
    if library.names() != ctrl.library.names():
        raise RuntimeError("library names did not survive reload")
    if tags.names() != ctrl.tags.names():
        raise RuntimeError("tag names did not survive reload")


def run_smoke(iterations: int = 200, seed: int = 20260213, verbose: bool = True) -> int:
    rng = random.Random(seed)
    store = MemoryStore()
    ctrl = RangeBuilderController(
        None,
        WorkingRange(store),
        TagRegistry(store),
        RangeLibrary(store),
    )

    tag_ids = [t.tag_id for t in BUILTIN_TAGS]
    counts = {"percent": 0, "toggle": 0, "library": 0, "rename": 0}
    failures: List[str] = []

    for i in range(iterations):
        step = ("percent", "toggle", "library", "rename")[i % 4]
        try:
            ctrl.select_tag(rng.choice(tag_ids))
            if step == "percent":
                _check_percentage(ctrl, round(rng.uniform(-5.0, 105.0), 1))
            elif step == "toggle":
                _check_toggle_inverse(ctrl, rng)
            elif step == "library":
                _check_library(ctrl, f"range-{rng.randrange(8)}")
                if rng.random() < 0.3:
                    ctrl.delete_range(rng.choice(ctrl.library.names()))
            else:
                before = ctrl.working.grid
                ctrl.rename_tag(rng.choice(tag_ids), f"name-{i}")
                if ctrl.working.grid != before:
                    raise RuntimeError("rename changed the grid")
            counts[step] += 1
        except Exception as e:
            failures.append(f"i={i} step={step} err={e}")

    try:
        _check_reload(store, ctrl)
    except RuntimeError as e:
        failures.append(f"reload err={e}")

    if verbose:
        print(
            f"smoke_runtime summary: iterations={iterations} seed={seed} "
            f"percent={counts['percent']} toggle={counts['toggle']} "
            f"library={counts['library']} rename={counts['rename']} "
            f"saved={len(ctrl.library)}"
        )
        if failures:
            print(f"failures={len(failures)}")
            for line in failures[:8]:
                print(f"- {line}")

    return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless runtime smoke for percent / paint / library / tags.")
    parser.add_argument("--iterations", type=int, default=200)
    parser.add_argument("--seed", type=int, default=20260213)
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()

    code = run_smoke(iterations=max(1, args.iterations), seed=args.seed, verbose=not args.quiet)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
