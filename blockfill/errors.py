"""
Generation and validation errors.

Region, path and segmentation failures are retried by the generator with a
derived seed. Timeouts end the request. Validation failures are internal
defects and are never retried.
"""

from __future__ import annotations

from typing import Any, Optional

USER_REMEDY = "Try a smaller size or a new seed."


class BlockfillError(RuntimeError):
    """Base class for all generation pipeline errors."""


class RegionUnreachableTarget(BlockfillError):
    """The frontier ran out before the region reached its target size."""

    def __init__(self, target: int, achieved: int, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Region stopped growing at {achieved} of {target} cells")
        self.target = target
        self.achieved = achieved


class HamiltonianFailure(BlockfillError):
    """Neither strip-and-stitch nor the backtracking fallback covered the region."""

    def __init__(self, size: int, reason: str = "", message: Optional[str] = None) -> None:
        super().__init__(
            message or f"No Hamiltonian path found for a {size}-cell region"
            + (f": {reason}" if reason else ""))
        self.size = size
        self.reason = reason


class SegmentationConstraintUnsatisfiable(BlockfillError):
    """K segments cannot be placed under the length bounds."""

    def __init__(
        self,
        path_length: int,
        color_count: int,
        min_length: int,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            message or f"Cannot cut a {path_length}-cell path into {color_count} "
            f"segments of at least {min_length} cells")
        self.path_length = path_length
        self.color_count = color_count
        self.min_length = min_length


class GenerationTimeout(BlockfillError):
    """The wall-clock budget for one request was exceeded."""

    def __init__(self, elapsed: float, budget: float, stage: str = "") -> None:
        where = f" during {stage}" if stage else ""
        super().__init__(
            f"Generation took {elapsed:.3f}s{where}, over the {budget:.3f}s budget. "
            f"{USER_REMEDY}")
        self.elapsed = elapsed
        self.budget = budget
        self.stage = stage


class ValidationFailure(BlockfillError):
    """A generated level failed its own coverage/overlap/mode checks."""

    def __init__(self, report: Any, message: Optional[str] = None) -> None:
        errors = getattr(report, "errors", None) or []
        super().__init__(
            message or "Generated level failed validation: " + "; ".join(errors))
        self.report = report
