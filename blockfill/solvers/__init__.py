"""Solver implementations for generated levels.

This package provides two solvers with identical APIs for sanity scoring and
cross-checking:

- BacktrackingSolver: pruned depth-first search with an expansion budget
- CircuitSolver: OR-Tools CP-SAT multiple-circuit model

Example usage:
    from blockfill.solvers import SolverType, create_solver

    solver = create_solver(SolverType.BACKTRACKING, max_expansions=5000)
    result = solver.solve(level)
    print(result.status, result.expansions)
"""

from .backtracking_solver import BacktrackingSolver
from .circuit_solver import CircuitSolver
from .solver_interface import SolveResult, SolveStatus, SolverInterface
from .solver_factory import SolverType, create_solver

__all__ = [
    "BacktrackingSolver",
    "CircuitSolver",
    "SolveResult",
    "SolveStatus",
    "SolverInterface",
    "SolverType",
    "create_solver",
]
