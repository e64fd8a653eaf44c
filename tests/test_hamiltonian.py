import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from blockfill.errors import HamiltonianFailure
from blockfill.hamiltonian import HamiltonianPathBuilder, is_hamiltonian_path
from blockfill.region import Region, grow_region
from rng import RandomNumberGenerator


@pytest.fixture
def builder():
    return HamiltonianPathBuilder(RandomNumberGenerator("hamiltonian"))


@pytest.mark.parametrize("width,height", [(4, 4), (2, 2), (5, 3), (2, 7), (10, 12)])
def test_solid_rectangles_use_strips(builder, width, height):
    region = Region(width, height, frozenset(range(width * height)))
    path = builder.build(region)
    assert is_hamiltonian_path(path, set(region.cells), width)
    assert builder.strategy == "strip"


def test_single_cell(builder):
    assert builder.build(Region(3, 3, frozenset({4}))) == [4]
    assert builder.strategy == "single"


def test_empty_region(builder):
    with pytest.raises(HamiltonianFailure):
        builder.build(Region(3, 3, frozenset()))


def test_unbalanced_parity_fails_fast(builder):
    # Plus shape: center plus four arms, all arms on the same color
    with pytest.raises(HamiltonianFailure, match="unbalanced"):
        builder.build(Region(3, 3, frozenset({1, 3, 4, 5, 7})))


def test_too_many_dead_ends(builder):
    # Cells 1, 5 and 6 each touch only one other cell
    with pytest.raises(HamiltonianFailure, match="dead-end"):
        builder.build(Region(3, 3, frozenset({1, 3, 4, 5, 6})))


def test_ring_needs_backtracking(builder):
    # 3x3 with the center removed: no row or column layout stitches together
    ring = frozenset({0, 1, 2, 3, 5, 6, 7, 8})
    path = builder.build(Region(3, 3, ring))
    assert is_hamiltonian_path(path, set(ring), 3)
    assert builder.strategy == "backtracking"
    assert builder.expansions > 0


def test_backtracking_starts_at_dead_end(builder):
    # 4x3: ring in the left 3x3 with a tail cell 7 hanging off its right side
    region = Region(4, 3, frozenset({0, 1, 2, 4, 6, 8, 9, 10, 7}))
    path = builder.build(region)
    assert is_hamiltonian_path(path, set(region.cells), 4)
    assert builder.strategy == "backtracking"
    assert path[0] == 7


HARD_SEEDS = [f"hard-{n}" for n in range(16)]


@pytest.mark.parametrize("width,height,target", [(8, 10, 72), (12, 14, 138)])
def test_grown_regions(width, height, target):
    built = 0
    for seed in HARD_SEEDS:
        rng = RandomNumberGenerator(seed)
        region, _ = grow_region(width, height, target, rng).normalized()
        try:
            path = HamiltonianPathBuilder(rng).build(region)
        except HamiltonianFailure:
            continue
        assert is_hamiltonian_path(path, set(region.cells), region.width)
        built += 1
    assert built >= 12, f"only {built} of {len(HARD_SEEDS)} regions got a path"


def test_backtracking_prunes_split_regions():
    # 5x3 whose middle column is open only in the center row, so the path
    # crosses it exactly once
    cells = frozenset(range(15)) - {2, 12}
    builder = HamiltonianPathBuilder(RandomNumberGenerator("split"), max_attempts=0,
                                     max_expansions=200)
    path = builder.build(Region(5, 3, cells))
    assert is_hamiltonian_path(path, set(cells), 5)
    assert builder.expansions < 200


def test_budget_exhaustion_raises():
    # Ring again, but with no strip layouts and a budget too small to finish
    builder = HamiltonianPathBuilder(RandomNumberGenerator(1), max_attempts=0, max_expansions=2)
    with pytest.raises(HamiltonianFailure, match="budget"):
        builder.build(Region(3, 3, frozenset({0, 1, 2, 3, 5, 6, 7, 8})))


def test_is_hamiltonian_path_rejects_gaps():
    assert not is_hamiltonian_path([0, 1, 2], {0, 1, 2, 3}, 2)
    assert not is_hamiltonian_path([0, 3, 1, 2], {0, 1, 2, 3}, 2)
    assert is_hamiltonian_path([0, 1, 3, 2], {0, 1, 2, 3}, 2)
