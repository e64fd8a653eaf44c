"""OR-Tools CP-SAT solver for levels.

The level is modelled as a multiple-circuit problem. Node 0 is a depot and
every open cell is a node. Each solution path becomes one circuit that
leaves the depot into the path's first cell, follows arcs between adjacent
cells, and returns to the depot from its last cell. Every cell has to be on
exactly one circuit, which gives full coverage and no overlap for free.

Depot arcs are restricted so each circuit starts on a start cell (modes 1
and 2) or runs from one pair cell to the other (mode 3). A color variable
per cell, equal along every chosen arc, keeps each circuit to one color.

Example usage:
    solver = CircuitSolver()
    result = solver.solve(level, seed=12345)
"""

from typing import Dict, List, Optional, Tuple
import logging as log
import time

from ortools.sat.python import cp_model

from ..level import Level
from .solver_interface import SolveResult, SolveStatus

DEPOT = 0


class CircuitSolver:
    """Solves levels exactly with a CP-SAT multiple-circuit model."""

    def __init__(self, num_workers: int = 1):
        self.num_workers = num_workers
        self.last_model: Optional[cp_model.CpModel] = None

    def solve(
        self,
        level: Level,
        seed: Optional[int] = None,
        time_limit_seconds: float = 10.0
    ) -> SolveResult:
        """Solve the level.

        Args:
            level: Level to solve
            seed: CP-SAT random seed (0 when omitted, for reproducibility)
            time_limit_seconds: Solver time limit

        Returns:
            SolveResult; `expansions` holds the number of search branches
        """
        started = time.monotonic()
        cells = sorted(level.open_cells)
        node_of = {cell: i + 1 for i, cell in enumerate(cells)}
        color_count = len(level.pairs) if level.mode == 3 else len(level.starts)

        model = cp_model.CpModel()
        color = {cell: model.NewIntVar(0, max(color_count - 1, 0), f"color_{cell}")
                 for cell in cells}
        arcs: List[Tuple[int, int, cp_model.IntVar]] = []
        cell_arcs: Dict[Tuple[int, int], cp_model.IntVar] = {}

        for cell in cells:
            x, y = cell % level.width, cell // level.width
            for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
                if not (0 <= nx < level.width and 0 <= ny < level.height):
                    continue
                other = ny * level.width + nx
                if other not in node_of:
                    continue
                literal = model.NewBoolVar(f"arc_{cell}_{other}")
                arcs.append((node_of[cell], node_of[other], literal))
                cell_arcs[(cell, other)] = literal
                model.Add(color[cell] == color[other]).OnlyEnforceIf(literal)

        first_cells: Dict[int, int] = {}
        if level.mode == 3:
            for pair in level.pairs:
                first_cells[pair.color] = pair.a
                model.Add(color[pair.a] == pair.color)
                model.Add(color[pair.b] == pair.color)
                arcs.append((DEPOT, node_of[pair.a], self._fixed(model)))
                arcs.append((node_of[pair.b], DEPOT, self._fixed(model)))
        else:
            for start in level.starts:
                first_cells[start.color] = start.index
                model.Add(color[start.index] == start.color)
                arcs.append((DEPOT, node_of[start.index], self._fixed(model)))
            for cell in cells:
                arcs.append((node_of[cell], DEPOT, model.NewBoolVar(f"end_{cell}")))

        model.AddMultipleCircuit(arcs)
        self.last_model = model

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = time_limit_seconds
        solver.parameters.random_seed = seed if seed is not None else 0
        solver.parameters.num_workers = self.num_workers

        log.debug(f"Solving {len(cells)}-cell level with {len(arcs)} arcs")
        status = solver.Solve(model)
        elapsed = time.monotonic() - started
        branches = int(solver.NumBranches())

        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            successor = {}
            for (cell, other), literal in cell_arcs.items():
                if solver.BooleanValue(literal):
                    successor[cell] = other
            paths = {}
            for path_color, first in sorted(first_cells.items()):
                path = [first]
                while path[-1] in successor:
                    path.append(successor[path[-1]])
                paths[path_color] = path
            return SolveResult(SolveStatus.SOLVED, paths, branches, elapsed)
        if status == cp_model.INFEASIBLE:
            return SolveResult(SolveStatus.UNSOLVABLE, {}, branches, elapsed)

        log.warning(f"CP-SAT stopped with status {solver.StatusName(status)}")
        return SolveResult(SolveStatus.BUDGET_EXHAUSTED, {}, branches, elapsed)

    @staticmethod
    def _fixed(model: cp_model.CpModel) -> cp_model.IntVar:
        """A literal fixed to true, for arcs every solution must use."""
        literal = model.NewBoolVar("fixed")
        model.Add(literal == 1)
        return literal
