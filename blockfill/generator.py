"""Level generation: the pipeline from a request to a verified Level.

    params -> region -> Hamiltonian path -> segments -> metrics -> Level

Region, path and segmentation failures are retried with a seed derived from
the request seed. The wall-clock budget is checked between stages and
between attempts.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
import logging as log
import os
import time

from params import GenerationParams
from rng.random_number_generator import RandomNumberGenerator

from .errors import (USER_REMEDY, GenerationTimeout, HamiltonianFailure,
                     RegionUnreachableTarget, SegmentationConstraintUnsatisfiable)
from .hamiltonian import HamiltonianPathBuilder
from .level import Level, Pair, Start
from .metrics import calculate_metrics
from .region import grow_region
from .segmenter import PathSegmenter
from .validator import verify_level

RETRYABLE_ERRORS = (RegionUnreachableTarget, HamiltonianFailure, SegmentationConstraintUnsatisfiable)

ENV_TIME_BUDGET = "BLOCKFILL_TIME_BUDGET"
ENV_MAX_ATTEMPTS = "BLOCKFILL_MAX_ATTEMPTS"


@dataclass
class GeneratorConfig:
    """Tuning knobs for the generation pipeline.

    Attributes:
        max_attempts: Seeds tried per request (the request seed plus derived ones)
        time_budget: Wall-clock seconds per request, or None for no limit
        size_tolerance: Open cells a region may fall short of its target
        path_attempts: Strip-and-stitch variants tried before backtracking
        path_candidates: Start cells tried by the backtracking fallback
        path_expansions: Expansion budget per start cell
        max_length_cv: Largest accepted spread of segment lengths
        max_cut_attempts: Cut draws before an even split
        max_pair_attempts: Cut shifts tried to repair mode 3 pairs
    """

    max_attempts: int = 8
    time_budget: Optional[float] = 0.5
    size_tolerance: int = 2
    path_attempts: int = 4
    path_candidates: int = 5
    path_expansions: int = 10_000
    max_length_cv: float = 0.5
    max_cut_attempts: int = 50
    max_pair_attempts: int = 20

    def __post_init__(self):
        self.check()

    def check(self) -> None:
        """Raise ValueError if the attempt count or the time budget is out of range."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.time_budget is not None and self.time_budget <= 0:
            raise ValueError(f"time_budget must be positive or None, got {self.time_budget}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "GeneratorConfig":
        """Build a config from BLOCKFILL_TIME_BUDGET and BLOCKFILL_MAX_ATTEMPTS.

        A time budget of 'none', 'off' or '0' disables the budget.

        Raises:
            ValueError: If a variable holds an unparsable or non-positive value
        """
        environ = os.environ if environ is None else environ
        config = cls(**overrides)

        budget = environ.get(ENV_TIME_BUDGET)
        if budget is not None and budget.strip():
            if budget.strip().lower() in ("none", "off", "0"):
                config.time_budget = None
            else:
                config.time_budget = float(budget)
                if config.time_budget <= 0:
                    raise ValueError(f"{ENV_TIME_BUDGET} must be positive, got {budget}")

        attempts = environ.get(ENV_MAX_ATTEMPTS)
        if attempts is not None and attempts.strip():
            config.max_attempts = int(attempts)
            if config.max_attempts < 1:
                raise ValueError(f"{ENV_MAX_ATTEMPTS} must be at least 1, got {attempts}")
        return config


class LevelGenerator:
    """Generates levels for requests.

    Usage:
        generator = LevelGenerator(GeneratorConfig(time_budget=None))
        level = generator.generate(GenerationParams.for_tier(1, "easy", seed="8f3kz2"))
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def generate(self, params: GenerationParams) -> Level:
        """Generate and verify the level for a request.

        Raises:
            ValueError: If the request breaks a cross-parameter rule, or the
                config holds an out-of-range attempt count or budget
            GenerationTimeout: If the time budget ran out
            RegionUnreachableTarget, HamiltonianFailure,
            SegmentationConstraintUnsatisfiable: If every attempt failed
            ValidationFailure: If the produced level does not solve itself
        """
        ok, errors = params.validate()
        if not ok:
            raise ValueError("; ".join(errors))
        self.config.check()

        started = time.monotonic()
        candidate_rng = RandomNumberGenerator(params.seed)
        last_error = None

        for attempt in range(self.config.max_attempts):
            if attempt == 0:
                seed = params.seed
            else:
                self._check_budget(started, "retry")
                seed = f"{params.seed}-{candidate_rng.randint(0, 999999)}"
            log.info(f"Attempt {attempt + 1} with seed {seed}")

            try:
                level = self._generate_once(params, seed, attempt, started)
            except RETRYABLE_ERRORS as e:
                log.info(f"Seed {seed} failed: {e}; trying a different seed")
                last_error = e
                continue

            verify_level(level)
            log.info(f"Seed {seed} passed validation "
                     f"({time.monotonic() - started:.3f}s, attempt {attempt + 1})")
            return level

        last_error.args = (
            f"{last_error} (gave up after {self.config.max_attempts} attempts). {USER_REMEDY}",)
        raise last_error

    def _check_budget(self, started: float, stage: str) -> None:
        budget = self.config.time_budget
        if budget is None:
            return
        elapsed = time.monotonic() - started
        if elapsed > budget:
            raise GenerationTimeout(elapsed, budget, stage)

    def _generate_once(self, params: GenerationParams, seed: str, attempt: int,
                       started: float) -> Level:
        config = self.config
        rng = RandomNumberGenerator(seed)
        width, height = params.width, params.height

        target = params.target_open_cells
        region = grow_region(width, height, target, rng)
        if len(region) < target - config.size_tolerance:
            raise RegionUnreachableTarget(target, len(region))
        self._check_budget(started, "region growth")

        normalized, offset = region.normalized()
        builder = HamiltonianPathBuilder(
            rng,
            max_attempts=config.path_attempts,
            max_candidates=config.path_candidates,
            max_expansions=config.path_expansions,
        )
        path = [normalized.denormalize(c, offset, width) for c in builder.build(normalized)]
        log.debug(f"Built {len(path)}-cell path by {builder.strategy} "
                  f"({builder.expansions} expansions)")
        self._check_budget(started, "path construction")

        segments, starts, pairs, low_quality = self._segment(params, path, region.cells, rng)
        self._check_budget(started, "segmentation")

        metrics = calculate_metrics(region.cells, width, height, segments)
        self._check_budget(started, "metrics")

        return Level(
            mode=params.mode,
            width=width,
            height=height,
            open=tuple(region.to_mask()),
            starts=starts,
            pairs=pairs,
            solution=segments,
            metrics=metrics,
            seed=params.seed,
            params=params.to_dict(),
            attempt=attempt,
            low_quality=low_quality,
        )

    def _segment(self, params: GenerationParams, path, open_cells, rng) -> Tuple:
        if params.mode == 1:
            return (tuple(path),), (Start(0, path[0]),), (), False

        config = self.config
        segmenter = PathSegmenter(
            rng,
            max_length_cv=config.max_length_cv,
            max_cut_attempts=config.max_cut_attempts,
            max_pair_attempts=config.max_pair_attempts,
        )
        if params.mode == 2:
            result = segmenter.split(path, params.colors, params.min_segment_length)
            starts = tuple(Start(color, cell) for color, cell in enumerate(result.starts))
            return result.segments, starts, (), False

        result = segmenter.split_pairs(path, params.colors, open_cells, params.width,
                                       params.height, params.min_segment_length)
        pairs = tuple(Pair(color, a, b) for color, (a, b) in enumerate(result.pairs))
        return result.segments, (), pairs, result.low_quality


def generate_level(params: GenerationParams, config: Optional[GeneratorConfig] = None) -> Level:
    """Generate the level for a request with a fresh generator."""
    return LevelGenerator(config).generate(params)
