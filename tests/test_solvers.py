import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from blockfill.generator import GeneratorConfig, LevelGenerator
from blockfill.solvers import (BacktrackingSolver, CircuitSolver, SolveStatus, SolverType,
                               create_solver)
from blockfill.validator import Validator
from level_builder import build_level
from params import GenerationParams

ALL_SOLVERS = [SolverType.BACKTRACKING, SolverType.CP_SAT]


@pytest.fixture(scope="module")
def generated_levels():
    generator = LevelGenerator(GeneratorConfig(time_budget=None))
    return {
        1: generator.generate(GenerationParams(m=1, w=5, h=5, k=1, hd=0.1, seed="solver1")),
        2: generator.generate(GenerationParams(m=2, w=5, h=5, k=3, hd=0.1, seed="solver2")),
        3: generator.generate(GenerationParams(m=3, w=5, h=5, k=3, hd=0.0, seed="solver3")),
    }


@pytest.mark.parametrize("solver_type", ALL_SOLVERS)
@pytest.mark.parametrize("mode", [1, 2, 3])
def test_solvers_solve_generated_levels(generated_levels, solver_type, mode):
    level = generated_levels[mode]
    result = create_solver(solver_type).solve(level, seed=1)
    assert result.status == SolveStatus.SOLVED
    assert result.solved
    assert Validator(level).validate(result.paths).valid


@pytest.mark.parametrize("solver_type", ALL_SOLVERS)
def test_unsolvable_level(solver_type):
    # A single path starting in the middle of a 3x1 strip cannot cover both ends
    level = build_level(1, 3, 1, [[1, 0, 2]])
    result = create_solver(solver_type).solve(level)
    assert result.status == SolveStatus.UNSOLVABLE
    assert result.paths == {}


@pytest.mark.parametrize("solver_type", ALL_SOLVERS)
def test_hand_made_pairs(solver_type):
    level = build_level(3, 3, 3, [[0, 1, 2, 5], [8, 7, 6, 3, 4]])
    result = create_solver(solver_type).solve(level)
    assert result.solved
    assert Validator(level).validate(result.paths).valid


def test_backtracking_budget_exhausted():
    level = build_level(1, 4, 4, [[0, 1, 2, 3, 7, 6, 5, 4, 8, 9, 10, 11, 15, 14, 13, 12]])
    result = BacktrackingSolver(max_expansions=1).solve(level)
    assert result.status == SolveStatus.BUDGET_EXHAUSTED
    assert result.expansions <= 1


def test_backtracking_counts_expansions():
    level = build_level(1, 4, 4, [[0, 1, 2, 3, 7, 6, 5, 4, 8, 9, 10, 11, 15, 14, 13, 12]])
    result = BacktrackingSolver().solve(level, seed=3)
    assert result.solved
    assert result.expansions >= 15


def test_backtracking_is_deterministic(generated_levels):
    level = generated_levels[2]
    a = BacktrackingSolver().solve(level, seed=9)
    b = BacktrackingSolver().solve(level, seed=9)
    assert a.paths == b.paths
    assert a.expansions == b.expansions


def test_mode2_single_cell_segment():
    # Color 1 owns only its start cell
    level = build_level(2, 3, 1, [[0, 1], [2]])
    result = BacktrackingSolver().solve(level)
    assert result.solved
    assert result.paths == {0: [0, 1], 1: [2]}


def test_circuit_solver_keeps_model():
    level = build_level(1, 2, 2, [[0, 1, 3, 2]])
    solver = CircuitSolver()
    assert solver.solve(level).solved
    assert solver.last_model is not None


def test_factory_accepts_names():
    assert isinstance(create_solver("backtracking"), BacktrackingSolver)
    assert isinstance(create_solver("cp_sat"), CircuitSolver)
    assert str(SolverType.CP_SAT) == "OR-Tools CP-SAT Circuit Solver"
    with pytest.raises(ValueError):
        create_solver("simulated_annealing")


def test_result_to_dict(generated_levels):
    result = BacktrackingSolver().solve(generated_levels[1])
    data = result.to_dict()
    assert data["status"] == "solved"
    assert list(data["paths"]) == ["0"]
