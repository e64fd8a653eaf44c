# blockfill/metrics.py
# Descriptive difficulty features of a generated level.

from dataclasses import asdict, dataclass
from typing import Any, Collection, Dict, Optional, Sequence

from . import grid

# JSON key for each field
METRIC_KEYS = {
    "size": "size",
    "hole_density": "holeDensity",
    "branching_factor": "branchingFactor",
    "forced_move_ratio": "forcedMoveRatio",
    "corridors_percent": "corridorsPercent",
    "turn_rate": "turnRate",
    "intertwine_index": "intertwineIndex",
}


@dataclass(frozen=True)
class DifficultyMetrics:
    size: int
    hole_density: float
    branching_factor: float
    forced_move_ratio: float
    corridors_percent: float
    turn_rate: float
    intertwine_index: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {METRIC_KEYS[name]: value for name, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DifficultyMetrics":
        by_key = {key: name for name, key in METRIC_KEYS.items()}
        return cls(**{by_key[key]: value for key, value in data.items() if key in by_key})


def turn_counts(path: Sequence[int], width: int):
    """(turns, interior steps) along one path."""
    if len(path) < 3:
        return 0, 0
    steps = grid.path_to_directions(path, width)
    turns = sum(1 for a, b in zip(steps, steps[1:]) if a != b)
    return turns, len(path) - 2


def calculate_metrics(
    open_cells: Collection[int],
    width: int,
    height: int,
    paths: Sequence[Sequence[int]],
) -> DifficultyMetrics:
    """Compute the difficulty features of a level.

    Args:
        open_cells: The level's open cells
        width: Grid width
        height: Grid height
        paths: Solution paths, one per color (a single path in mode 1)

    Returns:
        DifficultyMetrics; intertwine_index is None unless there are
        several paths. When there are, it is taken over every 4-adjacent
        pair of open cells (not only pairs along a segment boundary): the
        share of those pairs whose cells belong to different colors.
    """
    open_set = set(open_cells)
    size = len(open_set)
    if size == 0:
        raise ValueError("Cannot compute metrics for an empty level")

    branches = 0
    forced = 0
    corridors = 0
    for cell in open_set:
        x, y = cell % width, cell // width
        up = y > 0 and cell - width in open_set
        down = y < height - 1 and cell + width in open_set
        left = x > 0 and cell - 1 in open_set
        right = x < width - 1 and cell + 1 in open_set
        degree = up + down + left + right
        branches += degree
        if degree == 1:
            forced += 1
        if (up and down and not left and not right) or (left and right and not up and not down):
            corridors += 1

    turns = 0
    interior = 0
    for path in paths:
        t, i = turn_counts(path, width)
        turns += t
        interior += i

    intertwine = None
    if len(paths) > 1:
        owner = {}
        for color, path in enumerate(paths):
            for cell in path:
                owner[cell] = color
        pairs = 0
        mixed = 0
        for cell in open_set:
            # right and down neighbours count each adjacent pair once
            for n in (cell + 1, cell + width):
                if n in open_set and grid.are_adjacent(cell, n, width):
                    pairs += 1
                    if owner.get(cell) != owner.get(n):
                        mixed += 1
        intertwine = mixed / pairs if pairs else 0.0

    return DifficultyMetrics(
        size=size,
        hole_density=1 - size / (width * height),
        branching_factor=branches / size,
        forced_move_ratio=forced / size,
        corridors_percent=corridors / size,
        turn_rate=turns / interior if interior else 0.0,
        intertwine_index=intertwine,
    )
