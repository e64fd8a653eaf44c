"""Hamiltonian path construction over a normalized region.

Two strategies are tried in turn:

1. Strip-and-stitch: the region is cut into maximal straight runs (strips)
   along rows or columns, and the strips are laid end to end, each one in
   whichever direction connects to the end of the path so far. This is
   instant for solid or gently ragged shapes.
2. Bounded randomized backtracking: an iterative depth-first search from a
   handful of candidate start cells, with Warnsdorff-style move ordering and
   dead-end pruning. Each candidate gets a fixed expansion budget.

Whatever strategy produces a path, the path is re-verified before it is
returned.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, Set
import logging as log

from rng.random_number_generator import RandomNumberGenerator

from . import grid
from .errors import HamiltonianFailure
from .region import Region

DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_MAX_CANDIDATES = 5
DEFAULT_MAX_EXPANSIONS = 10_000


class StripVariant(NamedTuple):
    """One structural layout tried by strip-and-stitch."""

    columns: bool
    first_reversed: bool
    lines_reversed: bool


STRIP_VARIANTS = (
    StripVariant(columns=False, first_reversed=False, lines_reversed=False),
    StripVariant(columns=False, first_reversed=True, lines_reversed=False),
    StripVariant(columns=True, first_reversed=False, lines_reversed=False),
    StripVariant(columns=True, first_reversed=True, lines_reversed=False),
    StripVariant(columns=False, first_reversed=False, lines_reversed=True),
    StripVariant(columns=False, first_reversed=True, lines_reversed=True),
    StripVariant(columns=True, first_reversed=False, lines_reversed=True),
    StripVariant(columns=True, first_reversed=True, lines_reversed=True),
)


def is_hamiltonian_path(path: Sequence[int], cells: Set[int], width: int) -> bool:
    """True if `path` visits every cell of `cells` exactly once along 4-adjacent steps."""
    return (len(path) == len(cells)
            and set(path) == cells
            and grid.is_simple_path(path, width))


class HamiltonianPathBuilder:
    """Builds a Hamiltonian path for a region.

    Usage:
        builder = HamiltonianPathBuilder(rng)
        path = builder.build(region.normalized()[0])

    After a build, `strategy` names the strategy that succeeded and
    `expansions` counts the search nodes the backtracking fallback used.
    """

    def __init__(
        self,
        rng: RandomNumberGenerator,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
    ) -> None:
        self.rng = rng
        self.max_attempts = max_attempts
        self.max_candidates = max_candidates
        self.max_expansions = max_expansions
        self.strategy: Optional[str] = None
        self.expansions = 0

    def build(self, region: Region) -> List[int]:
        """Return a Hamiltonian path over the region's cells.

        Args:
            region: A region, normally normalized to its bounding box

        Returns:
            List of cell indices (in the region's own width)

        Raises:
            HamiltonianFailure: If no path was found within the limits, or
                the region cannot have one
        """
        self.strategy = None
        self.expansions = 0
        cells = set(region.cells)
        width, height = region.width, region.height
        size = len(cells)

        if size == 0:
            raise HamiltonianFailure(0, "region is empty")
        if size == 1:
            self.strategy = "single"
            return [next(iter(cells))]

        even, odd = region.color_counts()
        if abs(even - odd) > 1:
            raise HamiltonianFailure(size, f"checkerboard colors unbalanced ({even}/{odd})")

        adjacency = grid.adjacency(cells, width, height)
        dead_ends = [c for c, ns in adjacency.items() if len(ns) == 1]
        if len(dead_ends) > 2:
            raise HamiltonianFailure(size, f"{len(dead_ends)} dead-end cells")

        for attempt, variant in enumerate(STRIP_VARIANTS[:self.max_attempts]):
            path = self._strip_and_stitch(cells, width, variant)
            if path is not None and is_hamiltonian_path(path, cells, width):
                log.debug(f"Strip-and-stitch succeeded with {variant} "
                          f"(attempt {attempt + 1})")
                self.strategy = "strip"
                return path

        log.debug(f"Strip-and-stitch failed on {size} cells, falling back to backtracking")
        path = self._backtracking(cells, adjacency, width, even, odd, dead_ends)
        if path is not None and is_hamiltonian_path(path, cells, width):
            self.strategy = "backtracking"
            return path

        raise HamiltonianFailure(
            size, f"search budget exhausted after {self.expansions} expansions")

    # ========================================================================
    # Strip-and-stitch
    # ========================================================================

    @staticmethod
    def _strips(cells: Set[int], width: int, columns: bool) -> Dict[int, List[List[int]]]:
        """Maximal runs grouped by line (row y, or column x)."""
        lines: Dict[int, List[int]] = {}
        for c in cells:
            x, y = c % width, c // width
            line, pos = (x, y) if columns else (y, x)
            lines.setdefault(line, []).append(pos)

        strips: Dict[int, List[List[int]]] = {}
        for line, positions in lines.items():
            positions.sort()
            runs = [[positions[0]]]
            for pos in positions[1:]:
                if pos == runs[-1][-1] + 1:
                    runs[-1].append(pos)
                else:
                    runs.append([pos])
            if columns:
                strips[line] = [[p * width + line for p in run] for run in runs]
            else:
                strips[line] = [[line * width + p for p in run] for run in runs]
        return strips

    def _strip_and_stitch(
        self, cells: Set[int], width: int, variant: StripVariant
    ) -> Optional[List[int]]:
        strips = self._strips(cells, width, variant.columns)
        ordered = []
        for line in sorted(strips, reverse=variant.lines_reversed):
            ordered.extend(strips[line])

        path: List[int] = []
        reversed_last = variant.first_reversed
        for strip in ordered:
            if not path:
                reversed_now = variant.first_reversed
            else:
                forward = grid.are_adjacent(path[-1], strip[0], width)
                backward = grid.are_adjacent(path[-1], strip[-1], width)
                if forward and backward:
                    reversed_now = not reversed_last
                elif forward:
                    reversed_now = False
                elif backward:
                    reversed_now = True
                else:
                    return None
            path.extend(reversed(strip) if reversed_now else strip)
            reversed_last = reversed_now
        return path

    # ========================================================================
    # Bounded randomized backtracking
    # ========================================================================

    def _backtracking(
        self,
        cells: Set[int],
        adjacency: Dict[int, List[int]],
        width: int,
        even: int,
        odd: int,
        dead_ends: List[int],
    ) -> Optional[List[int]]:
        if dead_ends:
            candidates = list(dead_ends)
        else:
            if even == odd:
                candidates = sorted(cells)
            else:
                majority = 0 if even > odd else 1
                candidates = sorted(c for c in cells if grid.parity(c, width) == majority)
        self.rng.shuffle(candidates)
        # corners and other low-degree cells first
        candidates.sort(key=lambda c: len(adjacency[c]))

        for start in candidates[:self.max_candidates]:
            path, used = self._search(start, adjacency, width)
            self.expansions += used
            if path is not None:
                log.debug(f"Backtracking found a path from {start} after {used} expansions")
                return path
            log.debug(f"Backtracking from {start} gave up after {used} expansions")
        return None

    def _search(self, start: int, adjacency: Dict[int, List[int]], width: int):
        """Iterative DFS from one start cell.

        A branch is cut as soon as one path from the head can no longer
        finish the unvisited cells: a neighbour of the head is stranded,
        two cells away from the head are down to a single free neighbour,
        the leftover colors cannot alternate from the next step, or the
        unvisited cells have split into separate pieces.

        Returns:
            Tuple of (path or None, expansions used)
        """
        total = len(adjacency)
        free = {c: len(ns) for c, ns in adjacency.items()}
        single = sum(1 for d in free.values() if d == 1)
        left = [0, 0]
        for c in adjacency:
            left[grid.parity(c, width)] += 1
        visited: Set[int] = set()

        def visit(cell: int) -> None:
            nonlocal single
            if free[cell] == 1:
                single -= 1
            visited.add(cell)
            left[grid.parity(cell, width)] -= 1
            for n in adjacency[cell]:
                if n not in visited:
                    free[n] -= 1
                    if free[n] == 0:
                        single -= 1
                    elif free[n] == 1:
                        single += 1

        def leave(cell: int) -> None:
            nonlocal single
            visited.discard(cell)
            left[grid.parity(cell, width)] += 1
            for n in adjacency[cell]:
                if n not in visited:
                    free[n] += 1
                    if free[n] == 2:
                        single -= 1
                    elif free[n] == 1:
                        single += 1
            if free[cell] == 1:
                single += 1

        def split(first: int, remaining: int) -> bool:
            seen = {first}
            queue = [first]
            while queue:
                cell = queue.pop()
                for n in adjacency[cell]:
                    if n not in visited and n not in seen:
                        seen.add(n)
                        queue.append(n)
            return len(seen) < remaining

        def stranded(head: int) -> bool:
            remaining = total - len(visited)
            if remaining == 0:
                return False
            open_moves = [n for n in adjacency[head] if n not in visited]
            if not open_moves:
                return True
            if remaining > 1 and any(free[n] == 0 for n in open_moves):
                return True
            near = sum(1 for n in open_moves if free[n] == 1)
            if single - near > 1:
                return True
            following = 1 - grid.parity(head, width)
            if not 0 <= left[following] - left[1 - following] <= 1:
                return True
            return split(open_moves[0], remaining)

        def moves(head: int) -> List[int]:
            options = [n for n in adjacency[head] if n not in visited]
            self.rng.shuffle(options)
            options.sort(key=lambda n: free[n])
            # popped from the end
            options.reverse()
            return options

        expansions = 0
        path = [start]
        visit(start)
        stack = [[] if stranded(start) else moves(start)]
        while stack:
            if len(path) == total:
                return path, expansions
            options = stack[-1]
            if not options:
                stack.pop()
                leave(path.pop())
                continue
            expansions += 1
            if expansions > self.max_expansions:
                return None, expansions
            cell = options.pop()
            visit(cell)
            path.append(cell)
            stack.append([] if stranded(cell) else moves(cell))
        return None, expansions
