"""Bounded backtracking solver for levels.

Paths are grown one color at a time from their start cell (modes 1 and 2) or
from the first cell of their pair (mode 3). A mode 2 path may stop anywhere
except the last one, which has to cover whatever is left. Cells reserved for
colors that have not been drawn yet are off limits.

Branches are cut early when the unclaimed cells can no longer be covered:

- more unclaimed components than paths left to cover them, or a component
  that no remaining path can reach;
- an unclaimed cell boxed in on all sides, away from the head;
- a fully open 2x2 block whose whole outline is already claimed;
- in mode 3, a pair whose two cells ended up in different components.

The search is iterative with an explicit stack, so large levels do not run
into the recursion limit.
"""

from typing import Dict, List, Optional, Set, Tuple
import logging as log
import time

from rng.random_number_generator import RandomNumberGenerator

from .. import grid
from ..level import Level
from .solver_interface import SolveResult, SolveStatus

END = -1


class BacktrackingSolver:
    """Solves levels with pruned depth-first search under an expansion budget."""

    def __init__(self, max_expansions: int = 20000):
        self.max_expansions = max_expansions

    def solve(
        self,
        level: Level,
        seed: Optional[int] = None,
        time_limit_seconds: float = 10.0
    ) -> SolveResult:
        """Search for paths that solve the level.

        Args:
            level: Level to solve
            seed: Tie-break seed; defaults to the level's seed string
            time_limit_seconds: Wall-clock limit, checked between expansions

        Returns:
            SolveResult; `expansions` is the sanity score
        """
        rng = RandomNumberGenerator(seed if seed is not None else level.seed)
        search = _Search(level, rng)
        started = time.monotonic()
        deadline = started + time_limit_seconds if time_limit_seconds else None

        status, expansions = search.run(self.max_expansions, deadline)
        elapsed = time.monotonic() - started
        log.debug(f"Backtracking solver: {status.value} after {expansions} expansions "
                  f"in {elapsed:.3f}s")
        paths = search.result() if status == SolveStatus.SOLVED else {}
        return SolveResult(status, paths, expansions, elapsed)


class _Search:
    """Mutable search state for one solve call."""

    def __init__(self, level: Level, rng: RandomNumberGenerator):
        self.rng = rng
        self.mode = level.mode
        self.width = level.width
        self.height = level.height
        self.open_cells = set(level.open_cells)
        self.adjacency = grid.adjacency(self.open_cells, self.width, self.height)

        # (color, origin, target) per path to draw, in drawing order
        if level.mode == 3:
            self.plan = [(p.color, p.a, p.b) for p in level.pairs]
        else:
            self.plan = [(s.color, s.index, None) for s in level.starts]

        self.reserved: Dict[int, int] = {}
        for i, (_, origin, target) in enumerate(self.plan):
            self.reserved[origin] = i
            if target is not None:
                self.reserved[target] = i

        self.claimed: Dict[int, int] = {}
        self.paths: List[List[int]] = [[] for _ in self.plan]
        self.current = 0
        if self.plan:
            self._begin(0)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _begin(self, index: int) -> None:
        origin = self.plan[index][1]
        self.current = index
        self.claimed[origin] = index
        self.paths[index] = [origin]

    def apply(self, move: int) -> None:
        if move == END:
            self._begin(self.current + 1)
        else:
            self.claimed[move] = self.current
            self.paths[self.current].append(move)

    def undo(self, move: int) -> None:
        if move == END:
            origin = self.paths[self.current][0]
            del self.claimed[origin]
            self.paths[self.current] = []
            self.current -= 1
        else:
            del self.claimed[self.paths[self.current].pop()]

    def result(self) -> Dict[int, List[int]]:
        return {self.plan[i][0]: list(path) for i, path in enumerate(self.paths)}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def head(self) -> int:
        return self.paths[self.current][-1]

    def _target(self) -> Optional[int]:
        return self.plan[self.current][2]

    def _finished_pair(self) -> bool:
        return self.mode == 3 and self.head == self._target()

    def available(self, cell: int) -> bool:
        if cell in self.claimed:
            return False
        owner = self.reserved.get(cell)
        return owner is None or owner == self.current

    def free_degree(self, cell: int) -> int:
        return sum(1 for n in self.adjacency[cell] if self.available(n))

    def solved(self) -> bool:
        if not self.plan or self.current != len(self.plan) - 1:
            return False
        if len(self.claimed) != len(self.open_cells):
            return False
        return self.mode != 3 or self._finished_pair()

    def moves(self) -> List[int]:
        """Options in pop order (the last element is tried first)."""
        last = self.current == len(self.plan) - 1
        if self._finished_pair():
            return [] if last else [END]

        steps = [n for n in self.adjacency[self.head] if self.available(n)]
        self.rng.shuffle(steps)
        steps.sort(key=self.free_degree)
        steps.reverse()
        if self.mode == 2 and not last:
            return [END] + steps
        return steps

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------

    def pruned(self) -> bool:
        if len(self.claimed) == len(self.open_cells):
            return False
        if self._boxed_in() or self._sealed_block():
            return True
        return self._uncoverable_components()

    def _pending_origins(self) -> Set[int]:
        return {self.plan[i][1] for i in range(self.current + 1, len(self.plan))}

    def _recent(self) -> List[int]:
        path = self.paths[self.current]
        return path[-2:] if len(path) > 1 else path[-1:]

    def _boxed_in(self) -> bool:
        head = self.head
        pending = self._pending_origins()
        head_neighbors = set(self.adjacency[head])
        for cell in self._recent():
            for n in self.adjacency[cell]:
                if n in self.claimed or n in head_neighbors:
                    continue
                if any(m not in self.claimed for m in self.adjacency[n]):
                    continue
                # a lone pending start is a valid one-cell mode 2 path
                if self.mode == 2 and n in pending:
                    continue
                return True
        return False

    def _sealed_block(self) -> bool:
        head = self.head
        pending = self._pending_origins()
        for cell in self._recent():
            for top_left in grid.blocks_containing(cell, self.width, self.height):
                block = grid.block_cells(top_left, self.width)
                if any(c not in self.open_cells or c in self.claimed for c in block):
                    continue
                if any(c in pending for c in block):
                    continue
                if any(grid.are_adjacent(head, c, self.width) for c in block):
                    continue
                outline = grid.block_perimeter(top_left, self.width, self.height)
                if all(c not in self.open_cells or c in self.claimed for c in outline):
                    return True
        return False

    def _uncoverable_components(self) -> bool:
        unclaimed = [c for c in self.open_cells if c not in self.claimed]
        components = grid.connected_components(unclaimed, self.width, self.height)
        component_of = {}
        for i, component in enumerate(components):
            for c in component:
                component_of[c] = i

        active = not self._finished_pair()
        reachable = set()
        if active:
            reachable = {component_of[n] for n in self.adjacency[self.head]
                         if self.available(n)}

        pending = range(self.current + 1, len(self.plan))
        if len(components) > len(pending) + (1 if active else 0):
            return True

        uncovered = set(range(len(components)))
        for i in pending:
            _, origin, target = self.plan[i]
            if target is not None and component_of[origin] != component_of[target]:
                return True
            uncovered.discard(component_of[origin])

        if active:
            target = self._target()
            if target is not None:
                if component_of.get(target) not in reachable:
                    return True
                uncovered.discard(component_of[target])
            elif len(uncovered) == 1 and uncovered <= reachable:
                # the head can still walk into one component
                uncovered.clear()
        return bool(uncovered)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self, max_expansions: int, deadline: Optional[float]) -> Tuple[SolveStatus, int]:
        if not self.plan:
            return SolveStatus.UNSOLVABLE, 0

        expansions = 0
        stack: List[Tuple[List[int], Optional[int]]] = [
            ([] if self.pruned() else self.moves(), None)]
        while stack:
            if self.solved():
                return SolveStatus.SOLVED, expansions
            options, move = stack[-1]
            if not options:
                stack.pop()
                if move is not None:
                    self.undo(move)
                continue
            expansions += 1
            if expansions > max_expansions:
                return SolveStatus.BUDGET_EXHAUSTED, expansions - 1
            if deadline is not None and expansions % 256 == 0 and time.monotonic() > deadline:
                return SolveStatus.BUDGET_EXHAUSTED, expansions
            move = options.pop()
            self.apply(move)
            stack.append(([] if self.pruned() else self.moves(), move))
        return SolveStatus.UNSOLVABLE, expansions
