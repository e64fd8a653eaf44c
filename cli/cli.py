#!/usr/bin/env python3
"""Command-line interface for generating Blockfill levels."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Tuple
import logging

# Ensure project root is on the import path when executing from the CLI folder
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from blockfill.errors import BlockfillError
from blockfill.generator import GeneratorConfig, LevelGenerator
from blockfill.level import Level
from blockfill.solvers import SolveResult, SolverType, create_solver
from params import GenerationParams, parse_share_code
from params.definitions import EnumParam, FloatParam, IntegerParam
from params.registry import ParamRegistry
from version import __version_display__

# Parameters the CLI does not expose as options
HIDDEN_PARAMS = {'v'}


def option_name(name: str) -> str:
    return "--" + name.replace("_", "-")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a Blockfill level and write it as JSON.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"blockfill {__version_display__}")
    parser.add_argument(
        "--share-code",
        help="Share code such as '#v=1;m=2;w=8;h=10;k=3;hd=0.1;diff=easy;seed=abc'. "
             "Individual options below override its values.")

    for category, definitions in sorted(ParamRegistry.get_params_by_category().items()):
        group = parser.add_argument_group(category.display_name)
        for definition in definitions:
            if definition.key in HIDDEN_PARAMS:
                continue
            kwargs = {"dest": definition.name, "default": None, "help": definition.help_text}
            if isinstance(definition, EnumParam):
                kwargs["choices"] = list(definition.option_dict)
            elif isinstance(definition, IntegerParam):
                kwargs["type"] = int
            elif isinstance(definition, FloatParam):
                kwargs["type"] = float
            group.add_argument(option_name(definition.name), **kwargs)

    parser.add_argument(
        "--output",
        help="File to write the level JSON to. Printed to stdout when omitted.")
    parser.add_argument(
        "--solve",
        choices=[t.value for t in SolverType],
        help="Also solve the level with this solver and report the result.")
    parser.add_argument(
        "--time-budget",
        type=float,
        help="Wall-clock budget in seconds per level (0 disables it). "
             "Defaults to BLOCKFILL_TIME_BUDGET or 1.0.")
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Seeds to try before giving up. Defaults to BLOCKFILL_MAX_ATTEMPTS or 8.")
    parser.add_argument( '-log',
        '--loglevel',
        default='warning',
        help='Provide logging level. Example --loglevel debug, default=warning' )

    return parser


def params_from_args(args: argparse.Namespace) -> GenerationParams:
    """Build the request from --share-code and/or the individual options.

    Without a share code the request starts from the preset for the given
    mode and difficulty, with a fresh seed unless --seed is given.

    Raises:
        ValueError: If an option value is out of range
    """
    if args.share_code:
        params = parse_share_code(args.share_code)
    else:
        params = GenerationParams.for_tier(
            args.mode or 1, args.difficulty or "medium", seed=args.seed)

    for key, definition in ParamRegistry.get_all_params().items():
        if key in HIDDEN_PARAMS:
            continue
        value = getattr(args, definition.name, None)
        if value is not None:
            try:
                params.set(key, value)
            except TypeError as exc:
                raise ValueError(str(exc)) from exc
    return params


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    config = GeneratorConfig.from_env()
    if args.time_budget is not None:
        config.time_budget = args.time_budget if args.time_budget > 0 else None
    if args.max_attempts is not None:
        if args.max_attempts < 1:
            raise ValueError("--max-attempts must be at least 1")
        config.max_attempts = args.max_attempts
    return config


def run_generation(
        params: GenerationParams,
        config: GeneratorConfig,
        solver_name: Optional[str] = None) -> Tuple[Level, Optional[SolveResult]]:
    level = LevelGenerator(config).generate(params)
    result = None
    if solver_name:
        result = create_solver(SolverType(solver_name)).solve(level)
    return level, result


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        logging.basicConfig(level=args.loglevel.upper())
        params = params_from_args(args)
        config = config_from_args(args)
        level, result = run_generation(params, config, args.solve)
    except ValueError as exc:
        parser.error(str(exc))
    except BlockfillError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Share code: {params.to_share_code()}")
    if level.low_quality:
        print("Warning: some pairs could not be spread apart (low-quality level)")
    if result is not None:
        print(f"Solver: {result.status.value} after {result.expansions} expansions "
              f"({result.elapsed:.3f}s)")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(level.to_json(indent=2) + "\n")
        print(f"Level written to {output_path}")
    else:
        print(level.to_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
