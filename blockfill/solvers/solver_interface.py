"""Unified interface for all level solvers.

Solvers are used for sanity scoring: a level that a bounded search solves in
few expansions is easy, one that exhausts the budget is suspect. Every
solver returns the same SolveResult so they can be swapped and compared.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol

from ..level import Level


class SolveStatus(Enum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass
class SolveResult:
    """Outcome of one solve call.

    Attributes:
        status: Whether a solution was found, ruled out, or the search gave up
        paths: color -> path mapping when solved, else empty
        expansions: Search nodes expanded (the sanity score)
        elapsed: Wall-clock seconds spent
    """

    status: SolveStatus
    paths: Dict[int, List[int]] = field(default_factory=dict)
    expansions: int = 0
    elapsed: float = 0.0

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def to_dict(self) -> Dict:
        return {
            "status": self.status.value,
            "paths": {str(c): list(p) for c, p in self.paths.items()},
            "expansions": self.expansions,
            "elapsed": self.elapsed,
        }


class SolverInterface(Protocol):
    """Protocol every solver implements."""

    def solve(
        self,
        level: Level,
        seed: Optional[int] = None,
        time_limit_seconds: float = 10.0
    ) -> SolveResult:
        """Find paths that solve the level.

        Args:
            level: The level to solve; its own solution is ignored
            seed: Seed for tie-breaking (defaults to one derived from the level seed)
            time_limit_seconds: Best-effort wall-clock limit

        Returns:
            SolveResult describing the outcome
        """
        ...
