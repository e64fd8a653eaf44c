"""Checks a color -> path mapping against a level.

Each check can be run on its own. `validate` runs all of them for a final
answer and `progress` scores a partially drawn board.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Set, Tuple
import logging as log

from . import grid
from .errors import ValidationFailure
from .level import Level

Paths = Mapping[int, Sequence[int]]


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    errors: Tuple[str, ...] = ()
    cells: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: Tuple[str, ...] = ()
    overlapping_cells: Tuple[int, ...] = ()
    uncovered_cells: Tuple[int, ...] = ()
    coverage: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "overlappingCells": list(self.overlapping_cells),
            "uncoveredCells": list(self.uncovered_cells),
            "coverage": self.coverage,
        }


@dataclass(frozen=True)
class Progress:
    is_valid: bool
    is_complete: bool
    has_won: bool
    coverage_percent: int

    def to_dict(self) -> Dict:
        return {
            "isValid": self.is_valid,
            "isComplete": self.is_complete,
            "hasWon": self.has_won,
            "coverage": self.coverage_percent,
        }


def _join_colors(colors: Sequence[int]) -> str:
    names = [str(c) for c in colors]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def normalize_paths(paths: Mapping) -> Dict[int, List[int]]:
    """Coerce JSON-style string color keys and cell values to ints.

    Raises:
        TypeError: If `paths` is not a color -> path mapping
    """
    if not isinstance(paths, Mapping):
        raise TypeError(f"paths must map colors to cell lists, got {type(paths).__name__}")
    return {int(color): [int(c) for c in path] for color, path in paths.items()}


class Validator(object):
    """Validates drawn paths for one level.

    Usage:
        validator = Validator(level)
        report = validator.validate({0: [0, 1, 2], 1: [5, 4, 3]})
    """

    def __init__(self, level: Level) -> None:
        self.level = level
        self.open_cells: Set[int] = set(level.open_cells)
        self.width = level.width
        self.height = level.height

    @property
    def colors(self) -> List[int]:
        if self.level.mode == 3:
            return [p.color for p in self.level.pairs]
        return [s.color for s in self.level.starts]

    def check_coverage(self, paths: Paths) -> CheckResult:
        """Every open cell is drawn over and nothing else is."""
        drawn = set()
        for path in paths.values():
            drawn.update(path)
        missing = sorted(self.open_cells - drawn)
        outside = sorted(drawn - self.open_cells)
        errors = []
        if missing:
            errors.append(f"{len(missing)} open cells are not covered: {missing}")
        if outside:
            errors.append(f"cells outside the open region are used: {outside}")
        return CheckResult(not errors, tuple(errors), tuple(sorted(missing + outside)))

    def check_overlap(self, paths: Paths) -> CheckResult:
        """No cell is claimed by more than one color."""
        claims: Dict[int, List[int]] = {}
        for color in sorted(paths):
            for cell in dict.fromkeys(paths[color]):
                claims.setdefault(cell, []).append(color)
        shared = sorted(cell for cell, colors in claims.items() if len(colors) > 1)
        errors = tuple(
            f"cell {cell} is claimed by colors {_join_colors(claims[cell])}" for cell in shared)
        return CheckResult(not errors, errors, tuple(shared))

    def check_simple_paths(self, paths: Paths) -> CheckResult:
        """Each path stays on the grid, steps to 4-neighbours and never repeats a cell."""
        errors = []
        cells = set()
        total = self.width * self.height
        for color in sorted(paths):
            path = paths[color]
            seen = set()
            for i, cell in enumerate(path):
                if not 0 <= cell < total:
                    errors.append(f"color {color} leaves the grid at cell {cell}")
                    cells.add(cell)
                    continue
                if cell in seen:
                    errors.append(f"color {color} visits cell {cell} twice")
                    cells.add(cell)
                seen.add(cell)
                if i > 0 and not grid.are_adjacent(path[i - 1], cell, self.width):
                    errors.append(f"color {color} jumps from cell {path[i - 1]} to {cell}")
                    cells.add(cell)
        return CheckResult(not errors, tuple(errors), tuple(sorted(cells)))

    def check_mode_constraints(self, paths: Paths) -> CheckResult:
        """Starts and pairs are honoured and every color is present."""
        level = self.level
        errors = []
        cells = set()
        expected = self.colors
        missing = [c for c in expected if not paths.get(c)]
        extra = sorted(c for c in paths if c not in expected)
        if missing:
            errors.append(f"no path drawn for colors {_join_colors(missing)}")
        if extra:
            errors.append(f"unexpected colors {_join_colors(extra)}")

        if level.mode == 1:
            if len(paths) != 1:
                errors.append(f"mode 1 takes exactly one path, got {len(paths)}")
            for path in paths.values():
                if set(path) != self.open_cells or len(path) != len(self.open_cells):
                    errors.append("the path does not visit every open cell exactly once")
        elif level.mode == 2:
            for start in level.starts:
                path = paths.get(start.color)
                if path and start.index not in path:
                    errors.append(f"color {start.color} does not pass its start cell {start.index}")
                    cells.add(start.index)
        elif level.mode == 3:
            for pair in level.pairs:
                path = paths.get(pair.color)
                if not path:
                    continue
                if {path[0], path[-1]} != {pair.a, pair.b} or len(path) < 2:
                    errors.append(
                        f"color {pair.color} must run from cell {pair.a} to cell {pair.b}, "
                        f"got {path[0]} to {path[-1]}")
                    cells.update((pair.a, pair.b))
        return CheckResult(not errors, tuple(errors), tuple(sorted(cells)))

    def validate(self, paths: Mapping) -> ValidationReport:
        """Run every check and combine them into one report."""
        paths = normalize_paths(paths)
        coverage = self.check_coverage(paths)
        overlap = self.check_overlap(paths)
        simple = self.check_simple_paths(paths)
        mode = self.check_mode_constraints(paths)
        checks = (coverage, overlap, simple, mode)
        errors = tuple(e for check in checks for e in check.errors)
        uncovered = tuple(c for c in coverage.cells if c in self.open_cells)
        report = ValidationReport(
            valid=all(check.ok for check in checks),
            errors=errors,
            overlapping_cells=overlap.cells,
            uncovered_cells=uncovered,
            coverage=self._covered(paths) / len(self.open_cells) if self.open_cells else 0.0,
        )
        if not report.valid:
            log.debug(f"Validation failed with {len(errors)} errors")
        return report

    def progress(self, paths: Mapping) -> Progress:
        """Score a partially drawn board."""
        paths = normalize_paths(paths)
        drawn = set()
        for path in paths.values():
            drawn.update(path)
        is_valid = (self.check_simple_paths(paths).ok
                    and self.check_overlap(paths).ok
                    and drawn <= self.open_cells)
        covered = self._covered(paths)
        total = len(self.open_cells)
        return Progress(
            is_valid=is_valid,
            is_complete=covered == total,
            has_won=is_valid and covered == total and self.validate(paths).valid,
            coverage_percent=round(100 * covered / total) if total else 0,
        )

    def _covered(self, paths: Paths) -> int:
        drawn = set()
        for path in paths.values():
            drawn.update(path)
        return len(drawn & self.open_cells)


def verify_level(level: Level) -> ValidationReport:
    """Validate a level against its own solution.

    Raises:
        ValidationFailure: If the stored solution does not solve the level
    """
    report = Validator(level).validate(level.solution_paths())
    if not report.valid:
        raise ValidationFailure(report)
    return report
