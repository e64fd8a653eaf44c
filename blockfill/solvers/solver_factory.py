"""Solver lookup by name.

Lets the CLI, the worker and the tests switch between solver
implementations by name.
"""

from enum import Enum
from typing import Type
import logging as log

from .backtracking_solver import BacktrackingSolver
from .circuit_solver import CircuitSolver


class SolverType(Enum):
    """Solvers that can be selected by name."""

    BACKTRACKING = "backtracking"
    CP_SAT = "cp_sat"

    def __str__(self):
        """Display name used in logs and the CLI."""
        return {
            SolverType.BACKTRACKING: "Bounded Backtracking Solver",
            SolverType.CP_SAT: "OR-Tools CP-SAT Circuit Solver",
        }[self]


def get_solver_class(solver_type: SolverType) -> Type:
    """Look up the solver class for a type.

    Args:
        solver_type: Which solver

    Returns:
        The solver class
    """
    classes = {
        SolverType.BACKTRACKING: BacktrackingSolver,
        SolverType.CP_SAT: CircuitSolver,
    }
    return classes[solver_type]


def create_solver(solver_type, **kwargs):
    """Instantiate a solver.

    Args:
        solver_type: A SolverType or its string value ("backtracking", "cp_sat")
        **kwargs: Passed to the solver's constructor

    Returns:
        A ready-to-use solver

    Raises:
        ValueError: If the solver type name is unknown
    """
    solver_type = SolverType(solver_type)
    solver = get_solver_class(solver_type)(**kwargs)
    log.info(f"Created solver: {solver_type}")
    return solver
