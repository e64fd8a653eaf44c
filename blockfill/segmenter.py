"""Cutting a Hamiltonian path into colored segments.

Mode 2 levels give each segment's first cell as its start. Mode 3 levels give
the two end cells of each segment as a pair, so those ends must be far enough
apart to make the pair worth drawing.
"""

from dataclasses import dataclass
from statistics import mean, pstdev
from typing import Collection, List, Optional, Sequence, Tuple
import logging as log

from params.registry import MIN_SEGMENT_LENGTH
from rng.random_number_generator import RandomNumberGenerator

from . import grid
from .errors import SegmentationConstraintUnsatisfiable

MIN_PAIR_SEPARATION = 3

DEFAULT_MAX_LENGTH_CV = 0.5
DEFAULT_MAX_CUT_ATTEMPTS = 50
DEFAULT_MAX_PAIR_ATTEMPTS = 20


@dataclass(frozen=True)
class Segmentation:
    """Contiguous segments that partition a path, in path order."""

    segments: Tuple[Tuple[int, ...], ...]
    relaxed: bool = False
    low_quality: bool = False

    @property
    def starts(self) -> List[int]:
        return [segment[0] for segment in self.segments]

    @property
    def pairs(self) -> List[Tuple[int, int]]:
        return [(segment[0], segment[-1]) for segment in self.segments]

    @property
    def lengths(self) -> List[int]:
        return [len(segment) for segment in self.segments]


def length_cv(lengths: Sequence[int]) -> float:
    """Coefficient of variation (population std / mean) of segment lengths."""
    average = mean(lengths)
    if average == 0:
        return 0.0
    return pstdev(lengths) / average


def even_cuts(n: int, color_count: int) -> List[int]:
    """Cut positions for an even split; the remainder goes to the first segments."""
    base, extra = divmod(n, color_count)
    cuts = []
    position = 0
    for i in range(color_count - 1):
        position += base + (1 if i < extra else 0)
        cuts.append(position)
    return cuts


def split_at(path: Sequence[int], cuts: Sequence[int]) -> Tuple[Tuple[int, ...], ...]:
    bounds = [0] + list(cuts) + [len(path)]
    return tuple(tuple(path[a:b]) for a, b in zip(bounds, bounds[1:]))


def pair_violation(
    segment: Sequence[int],
    a_pos: int,
    b_pos: int,
    open_cells: Collection[int],
    width: int,
    height: int,
) -> Optional[str]:
    """Return why a pair is too easy to connect, or None if it is acceptable.

    Args:
        segment: The segment's cells in path order
        a_pos: Position of the first pair cell within the segment
        b_pos: Position of the second pair cell within the segment
        open_cells: Open cells of the level
        width: Grid width
        height: Grid height
    """
    if abs(b_pos - a_pos) < MIN_PAIR_SEPARATION:
        return f"pair cells are {abs(b_pos - a_pos)} steps apart"
    if len(segment) == 4:
        min_x, min_y, max_x, max_y = grid.bounding_box(segment, width)
        if max_x - min_x == 1 and max_y - min_y == 1:
            return "segment is a 2x2 block"
    a, b = segment[a_pos], segment[b_pos]
    shared = set(grid.blocks_containing(a, width, height)) & set(
        grid.blocks_containing(b, width, height))
    for top_left in sorted(shared):
        if grid.is_open_block(top_left, width, open_cells):
            return f"pair cells {a} and {b} share the open 2x2 block at {top_left}"
    return None


class PathSegmenter:
    """Splits a path into K colored segments.

    Args:
        rng: Request RNG
        max_length_cv: Largest accepted coefficient of variation of lengths
        max_cut_attempts: Cut draws before falling back to an even split
        max_pair_attempts: Cut shifts tried to repair mode 3 pairs
    """

    def __init__(
        self,
        rng: RandomNumberGenerator,
        max_length_cv: float = DEFAULT_MAX_LENGTH_CV,
        max_cut_attempts: int = DEFAULT_MAX_CUT_ATTEMPTS,
        max_pair_attempts: int = DEFAULT_MAX_PAIR_ATTEMPTS,
    ) -> None:
        self.rng = rng
        self.max_length_cv = max_length_cv
        self.max_cut_attempts = max_cut_attempts
        self.max_pair_attempts = max_pair_attempts

    def split(
        self, path: Sequence[int], color_count: int, min_length: int = MIN_SEGMENT_LENGTH[2]
    ) -> Segmentation:
        """Cut the path into `color_count` segments (mode 2).

        Raises:
            SegmentationConstraintUnsatisfiable: If the path is shorter than
                color_count * min_length
        """
        cuts, relaxed = self._draw_cuts(len(path), color_count, min_length)
        return Segmentation(split_at(path, cuts), relaxed=relaxed)

    def split_pairs(
        self,
        path: Sequence[int],
        color_count: int,
        open_cells: Collection[int],
        width: int,
        height: int,
        min_length: int = MIN_SEGMENT_LENGTH[3],
    ) -> Segmentation:
        """Cut the path into segments whose end cells make good pairs (mode 3).

        Raises:
            SegmentationConstraintUnsatisfiable: If the path is shorter than
                color_count * min_length
        """
        min_length = max(min_length, MIN_SEGMENT_LENGTH[3])
        cuts, relaxed = self._draw_cuts(len(path), color_count, min_length)
        n = len(path)

        def first_violation():
            bounds = [0] + cuts + [n]
            for i in range(color_count):
                segment = path[bounds[i]:bounds[i + 1]]
                reason = pair_violation(segment, 0, len(segment) - 1, open_cells, width, height)
                if reason:
                    return i, reason
            return None

        for _ in range(self.max_pair_attempts):
            violation = first_violation()
            if violation is None:
                break
            index, reason = violation
            log.debug(f"Segment {index}: {reason}")
            options = self._shift_options(cuts, n, index, min_length)
            if not options:
                break
            cut, delta = self.rng.choice(options)
            cuts[cut] += delta

        violation = first_violation()
        if violation is not None:
            log.warning(f"Accepting low-quality pairs: segment {violation[0]}: {violation[1]}")
        return Segmentation(split_at(path, cuts), relaxed=relaxed,
                            low_quality=violation is not None)

    def _draw_cuts(self, n: int, color_count: int, min_length: int) -> Tuple[List[int], bool]:
        if color_count < 1 or n < color_count * min_length:
            raise SegmentationConstraintUnsatisfiable(n, color_count, min_length)
        if color_count == 1:
            return [], False

        positions = list(range(min_length, n - min_length + 1))
        for attempt in range(self.max_cut_attempts):
            self.rng.shuffle(positions)
            cuts = sorted(positions[:color_count - 1])
            bounds = [0] + cuts + [n]
            lengths = [b - a for a, b in zip(bounds, bounds[1:])]
            if min(lengths) >= min_length and length_cv(lengths) <= self.max_length_cv:
                log.debug(f"Accepted cuts {cuts} on draw {attempt + 1}")
                return cuts, False

        log.warning(f"No balanced cut set in {self.max_cut_attempts} draws; "
                    f"using an even split of {n} cells into {color_count}")
        return even_cuts(n, color_count), True

    @staticmethod
    def _shift_options(cuts: List[int], n: int, index: int, min_length: int):
        """(cut index, delta) moves that change the ends of segment `index`."""
        bounds = [0] + cuts + [n]
        lengths = [b - a for a, b in zip(bounds, bounds[1:])]
        options = []
        if index > 0:
            if lengths[index] > min_length:
                options.append((index - 1, 1))
            elif lengths[index - 1] > min_length:
                options.append((index - 1, -1))
        if index < len(cuts):
            if lengths[index] > min_length:
                options.append((index, -1))
            elif lengths[index + 1] > min_length:
                options.append((index, 1))
        return options
