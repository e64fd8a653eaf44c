"""Builds small hand-made levels for tests."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from blockfill import grid
from blockfill.level import Level, Pair, Start
from blockfill.metrics import calculate_metrics


def build_level(mode, width, height, solution, open_cells=None, seed="test"):
    """Level whose starts (or pairs) come from the ends of the given paths.

    The open region defaults to the cells the paths cover.
    """
    if open_cells is None:
        open_cells = {c for path in solution for c in path}
    if mode == 3:
        starts = ()
        pairs = tuple(Pair(color, path[0], path[-1]) for color, path in enumerate(solution))
    else:
        starts = tuple(Start(color, path[0]) for color, path in enumerate(solution))
        pairs = ()
    return Level(
        mode=mode,
        width=width,
        height=height,
        open=tuple(grid.cells_to_mask(open_cells, width, height)),
        starts=starts,
        pairs=pairs,
        solution=tuple(tuple(path) for path in solution),
        metrics=calculate_metrics(open_cells, width, height, solution),
        seed=seed,
    )
