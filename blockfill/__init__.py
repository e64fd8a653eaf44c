"""Blockfill: seeded generation and verification of grid-path puzzles.

Example usage:
    from blockfill import LevelGenerator
    from params import GenerationParams

    level = LevelGenerator().generate(GenerationParams.for_tier(2, "easy", seed="abc123"))
    print(level.to_json())
"""

from .errors import (BlockfillError, GenerationTimeout, HamiltonianFailure,
                     RegionUnreachableTarget, SegmentationConstraintUnsatisfiable,
                     ValidationFailure)
from .generator import GeneratorConfig, LevelGenerator, generate_level
from .level import Level, Pair, Start
from .metrics import DifficultyMetrics, calculate_metrics
from .validator import CheckResult, Progress, ValidationReport, Validator

__all__ = [
    "BlockfillError",
    "GenerationTimeout",
    "HamiltonianFailure",
    "RegionUnreachableTarget",
    "SegmentationConstraintUnsatisfiable",
    "ValidationFailure",
    "GeneratorConfig",
    "LevelGenerator",
    "generate_level",
    "Level",
    "Pair",
    "Start",
    "DifficultyMetrics",
    "calculate_metrics",
    "CheckResult",
    "Progress",
    "ValidationReport",
    "Validator",
]
