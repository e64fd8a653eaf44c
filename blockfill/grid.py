# blockfill/grid.py
# Cell index helpers. A cell is addressed by the single integer y*width + x.

from collections import deque
from typing import Callable, Collection, Dict, Iterable, List, Optional, Sequence, Set, Tuple

# Step codes used when a path is written as moves: 0=up, 1=right, 2=down, 3=left
UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
DIRECTION_VECTORS = {UP: (0, -1), RIGHT: (1, 0), DOWN: (0, 1), LEFT: (-1, 0)}


def to_index(x: int, y: int, width: int) -> int:
    return y * width + x


def to_coords(index: int, width: int) -> Tuple[int, int]:
    return index % width, index // width


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def neighbors(index: int, width: int, height: int) -> List[int]:
    """In-bounds 4-neighbours in left, right, up, down order."""
    x, y = index % width, index // width
    out = []
    if x > 0:
        out.append(index - 1)
    if x < width - 1:
        out.append(index + 1)
    if y > 0:
        out.append(index - width)
    if y < height - 1:
        out.append(index + width)
    return out


def open_neighbors(index: int, width: int, height: int, open_cells: Collection[int]) -> List[int]:
    return [n for n in neighbors(index, width, height) if n in open_cells]


def are_adjacent(a: int, b: int, width: int) -> bool:
    """True if the two cells share an edge (no diagonals, no row wrap)."""
    ax, ay = a % width, a // width
    bx, by = b % width, b // width
    return abs(ax - bx) + abs(ay - by) == 1


def parity(index: int, width: int) -> int:
    """Checkerboard color of a cell (0 or 1)."""
    return ((index % width) + (index // width)) & 1


def adjacency(cells: Iterable[int], width: int, height: int) -> Dict[int, List[int]]:
    cell_set = set(cells)
    return {c: open_neighbors(c, width, height, cell_set) for c in sorted(cell_set)}


def connected_components(cells: Collection[int], width: int, height: int) -> List[List[int]]:
    """4-connected components, each sorted, ordered by their smallest cell."""
    cell_set = set(cells)
    seen: Set[int] = set()
    components = []
    for start in sorted(cell_set):
        if start in seen:
            continue
        seen.add(start)
        component = [start]
        queue = deque([start])
        while queue:
            cell = queue.popleft()
            for n in neighbors(cell, width, height):
                if n in cell_set and n not in seen:
                    seen.add(n)
                    component.append(n)
                    queue.append(n)
        components.append(sorted(component))
    return components


def is_connected(cells: Collection[int], width: int, height: int) -> bool:
    return len(connected_components(cells, width, height)) == 1


def shortest_path(
    start: int,
    goal: int,
    width: int,
    height: int,
    passable: Optional[Callable[[int], bool]] = None,
) -> Optional[List[int]]:
    """Breadth-first shortest 4-neighbour path from start to goal, inclusive.

    Args:
        start: First cell
        goal: Last cell (always enterable, even if not passable)
        width: Grid width
        height: Grid height
        passable: Predicate for intermediate cells (default: every cell)

    Returns:
        The cell list from start to goal, or None if goal is unreachable
    """
    if start == goal:
        return [start]
    previous = {start: start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for n in neighbors(cell, width, height):
            if n in previous:
                continue
            if n != goal and passable is not None and not passable(n):
                continue
            previous[n] = cell
            if n == goal:
                path = [goal]
                while path[-1] != start:
                    path.append(previous[path[-1]])
                path.reverse()
                return path
            queue.append(n)
    return None


def bounding_box(cells: Iterable[int], width: int) -> Tuple[int, int, int, int]:
    """(min_x, min_y, max_x, max_y) of a non-empty cell collection."""
    xs = []
    ys = []
    for c in cells:
        xs.append(c % width)
        ys.append(c // width)
    if not xs:
        raise ValueError("bounding_box of an empty cell collection")
    return min(xs), min(ys), max(xs), max(ys)


def cells_to_mask(cells: Iterable[int], width: int, height: int) -> List[int]:
    mask = [0] * (width * height)
    for c in cells:
        mask[c] = 1
    return mask


def mask_to_cells(mask: Sequence[int]) -> Set[int]:
    return {i for i, bit in enumerate(mask) if bit}


def block_cells(top_left: int, width: int) -> Tuple[int, int, int, int]:
    return top_left, top_left + 1, top_left + width, top_left + width + 1


def blocks_containing(index: int, width: int, height: int) -> List[int]:
    """Top-left indices of every in-bounds 2x2 block that contains the cell."""
    x, y = index % width, index // width
    out = []
    for tx in (x - 1, x):
        for ty in (y - 1, y):
            if 0 <= tx < width - 1 and 0 <= ty < height - 1:
                out.append(ty * width + tx)
    return out


def is_open_block(top_left: int, width: int, open_cells: Collection[int]) -> bool:
    return all(c in open_cells for c in block_cells(top_left, width))


def block_perimeter(top_left: int, width: int, height: int) -> List[int]:
    """In-bounds cells that touch a 2x2 block from outside."""
    inside = set(block_cells(top_left, width))
    out = []
    for c in block_cells(top_left, width):
        for n in neighbors(c, width, height):
            if n not in inside and n not in out:
                out.append(n)
    return out


def path_to_directions(path: Sequence[int], width: int) -> List[int]:
    """Encode a path as step codes (0=up, 1=right, 2=down, 3=left)."""
    steps = []
    for a, b in zip(path, path[1:]):
        ax, ay = a % width, a // width
        bx, by = b % width, b // width
        if bx > ax:
            steps.append(RIGHT)
        elif bx < ax:
            steps.append(LEFT)
        elif by > ay:
            steps.append(DOWN)
        else:
            steps.append(UP)
    return steps


def is_simple_path(path: Sequence[int], width: int) -> bool:
    """No repeated cells and every consecutive pair 4-adjacent."""
    if len(set(path)) != len(path):
        return False
    return all(are_adjacent(a, b, width) for a, b in zip(path, path[1:]))
