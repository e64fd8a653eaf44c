"""Irregular connected region growth.

A region starts from the center cell of the rectangle and grows one frontier
cell at a time. Candidates touching more of the region are favoured, which
keeps the outline compact, and candidates of the under-represented
checkerboard color are boosted so the finished region stays close to
parity-balanced (a region whose colors differ by more than one has no
Hamiltonian path).

A finished region is swept for dead ends, cells with a single open
neighbour. A path has to start or end on each of them, so each one is moved:
the dead end is dropped and a frontier notch of the same color is filled,
which keeps both the size and the color balance.
"""

from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple
import logging as log

from rng.random_number_generator import RandomNumberGenerator

from . import grid


@dataclass(frozen=True)
class Region:
    """A set of open cells inside a width x height rectangle."""

    width: int
    height: int
    cells: FrozenSet[int]

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, index: int) -> bool:
        return index in self.cells

    def to_mask(self) -> List[int]:
        return grid.cells_to_mask(self.cells, self.width, self.height)

    def color_counts(self) -> Tuple[int, int]:
        """Number of cells on each checkerboard color."""
        odd = sum(grid.parity(c, self.width) for c in self.cells)
        return len(self.cells) - odd, odd

    def normalized(self) -> Tuple["Region", Tuple[int, int]]:
        """Re-index the region so its bounding box starts at the origin.

        Returns:
            The normalized region and the (dx, dy) offset that maps a
            normalized cell back to this region's coordinates
        """
        min_x, min_y, max_x, max_y = grid.bounding_box(self.cells, self.width)
        new_width = max_x - min_x + 1
        new_height = max_y - min_y + 1
        cells = frozenset(
            (c // self.width - min_y) * new_width + (c % self.width - min_x)
            for c in self.cells
        )
        return Region(new_width, new_height, cells), (min_x, min_y)

    def denormalize(self, cell: int, offset: Tuple[int, int], width: int) -> int:
        """Map a cell of this (normalized) region into a grid of the given width."""
        dx, dy = offset
        return (cell // self.width + dy) * width + (cell % self.width + dx)


def grow_region(width: int, height: int, target: int, rng: RandomNumberGenerator) -> Region:
    """Grow a single connected region of up to `target` cells.

    Args:
        width: Rectangle width
        height: Rectangle height
        target: Desired open cell count (clamped to [1, width*height])
        rng: Request RNG; every draw comes from here

    Returns:
        The grown region. It may hold fewer than `target` cells if the
        frontier ran out; the caller decides whether that is acceptable.
    """
    total = width * height
    target = max(1, min(target, total))
    if target == total:
        log.debug(f"Region target {target} fills the {width}x{height} rectangle")
        return Region(width, height, frozenset(range(total)))

    center = grid.to_index(width // 2, height // 2, width)
    region = {center}
    counts = [0, 0]
    counts[grid.parity(center, width)] += 1
    # dict keys give an insertion-ordered set
    frontier = dict.fromkeys(grid.neighbors(center, width, height))

    while len(region) < target and frontier:
        imbalance = counts[0] - counts[1]
        minority = 1 if imbalance > 0 else 0
        candidates = list(frontier)
        if imbalance and abs(imbalance) >= target - len(region):
            # The last few cells must all come from the minority color
            forced = [c for c in candidates if grid.parity(c, width) == minority]
            if forced:
                candidates = forced
        weights = []
        for cell in candidates:
            weight = float(len(grid.open_neighbors(cell, width, height, region))) ** 2
            if imbalance and grid.parity(cell, width) == minority:
                weight *= 1 + abs(imbalance)
            weights.append(weight)

        cell = rng.weighted_choice(candidates, weights)
        del frontier[cell]
        region.add(cell)
        counts[grid.parity(cell, width)] += 1
        for n in grid.neighbors(cell, width, height):
            if n not in region and n not in frontier:
                frontier[n] = None

    if len(region) < target:
        log.debug(f"Frontier exhausted at {len(region)} of {target} cells")

    region = _bridge_components(region, width, height)
    region = _move_dead_ends(region, width, height, rng)
    log.debug(f"Grew region of {len(region)} cells in {width}x{height} "
              f"(colors {counts[0]}/{counts[1]})")
    return Region(width, height, frozenset(region))


def _bridge_components(region: set, width: int, height: int) -> set:
    """Join every stray component to the largest one through the rectangle."""
    components = grid.connected_components(region, width, height)
    if len(components) <= 1:
        return region

    components.sort(key=len, reverse=True)
    main = set(components[0])
    for component in components[1:]:
        bridge = _shortest_bridge(component, main, width, height)
        if bridge is None:
            continue
        log.warning(f"Bridged a stray {len(component)}-cell component "
                    f"with {len(bridge)} extra cells")
        main.update(component)
        main.update(bridge)
    return main


def _shortest_bridge(
    component: List[int], main: set, width: int, height: int
) -> Optional[List[int]]:
    """Cells strictly between `component` and `main` on a shortest 4-path."""
    previous = {c: None for c in component}
    queue = deque(component)
    while queue:
        cell = queue.popleft()
        for n in grid.neighbors(cell, width, height):
            if n in previous:
                continue
            previous[n] = cell
            if n in main:
                bridge = []
                step = cell
                while previous[step] is not None:
                    bridge.append(step)
                    step = previous[step]
                return bridge
            queue.append(n)
    return None


def dead_ends(cells: Iterable[int], width: int, height: int) -> List[int]:
    """Cells of `cells` with exactly one open 4-neighbour, in index order."""
    return [c for c, ns in grid.adjacency(cells, width, height).items() if len(ns) == 1]


def _move_dead_ends(region: set, width: int, height: int, rng: RandomNumberGenerator) -> set:
    """Trade each dead end for a same-colored frontier cell with two or more open neighbours.

    Dropping a dead end can turn its neighbour into one (the tip of a
    corridor), so the sweep repeats until none are left or nothing can move.
    """
    region = set(region)
    for _ in range(len(region)):
        stuck = dead_ends(region, width, height)
        if not stuck:
            break
        cell = stuck[0]
        color = grid.parity(cell, width)
        region.discard(cell)

        candidates, weights = [], []
        for frontier in sorted({n for c in region for n in grid.neighbors(c, width, height)}):
            if frontier in region or frontier == cell or grid.parity(frontier, width) != color:
                continue
            support = len(grid.open_neighbors(frontier, width, height, region))
            if support >= 2:
                candidates.append(frontier)
                weights.append(float(support) ** 2)
        if not candidates:
            region.add(cell)
            log.debug(f"No notch left to absorb dead end {cell}")
            break

        notch = rng.weighted_choice(candidates, weights)
        region.add(notch)
        log.debug(f"Moved dead end {cell} to notch {notch}")
    return region
