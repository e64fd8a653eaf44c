import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from blockfill.errors import SegmentationConstraintUnsatisfiable
from blockfill.segmenter import (PathSegmenter, even_cuts, length_cv, pair_violation,
                                 split_at)
from rng import RandomNumberGenerator


def serpentine(width, height):
    path = []
    for y in range(height):
        row = [y * width + x for x in range(width)]
        path.extend(row if y % 2 == 0 else reversed(row))
    return path


@pytest.fixture
def segmenter():
    return PathSegmenter(RandomNumberGenerator("segments"))


@pytest.mark.parametrize("n,k", [(12, 3), (30, 4), (6, 2), (40, 6)])
def test_split_partitions_path(segmenter, n, k):
    path = list(range(100, 100 + n))
    result = segmenter.split(path, k, min_length=3)
    assert len(result.segments) == k
    assert [c for segment in result.segments for c in segment] == path
    assert min(result.lengths) >= 3
    assert result.starts == [segment[0] for segment in result.segments]


def test_split_single_color(segmenter):
    result = segmenter.split([1, 2, 3, 4], 1, min_length=3)
    assert result.segments == ((1, 2, 3, 4),)


def test_split_unsatisfiable(segmenter):
    with pytest.raises(SegmentationConstraintUnsatisfiable) as excinfo:
        segmenter.split(list(range(5)), 2, min_length=3)
    assert excinfo.value.path_length == 5
    assert excinfo.value.color_count == 2


def test_split_falls_back_to_even_cuts():
    # No cut set of 10 cells into 3 has zero spread
    segmenter = PathSegmenter(RandomNumberGenerator(7), max_length_cv=0.0)
    result = segmenter.split(list(range(10)), 3, min_length=3)
    assert result.relaxed
    assert result.lengths == [4, 3, 3]


def test_even_cuts_and_split_at():
    assert even_cuts(10, 3) == [4, 7]
    assert even_cuts(9, 1) == []
    assert split_at([1, 2, 3, 4, 5], [2]) == ((1, 2), (3, 4, 5))


def test_length_cv():
    assert length_cv([5, 5, 5]) == 0.0
    assert length_cv([2, 6]) == pytest.approx(0.5)


def test_pair_too_close():
    # An 8-cell segment along the top row of a 4x4 board, bent into the second row
    segment = [0, 1, 2, 3, 7, 6, 5, 4]
    open_cells = set(range(16))
    reason = pair_violation(segment, 0, 1, open_cells, 4, 4)
    assert reason is not None
    assert "1 steps apart" in reason


def test_pair_in_two_by_two_segment():
    reason = pair_violation([0, 1, 5, 4], 0, 3, set(range(16)), 4, 4)
    assert reason == "segment is a 2x2 block"


def test_pair_sharing_open_block():
    # Ends 0 and 5 of a U-shaped path share the open block at the top-left
    segment = [0, 4, 8, 9, 10, 6, 5]
    reason = pair_violation(segment, 0, len(segment) - 1, set(range(16)), 4, 4)
    assert reason is not None
    assert "2x2 block at 0" in reason


def test_pair_acceptable():
    segment = [0, 1, 2, 3]
    assert pair_violation(segment, 0, 3, set(range(16)), 4, 4) is None


@pytest.mark.parametrize("seed", ["pairs", "8f3kz2", 11])
def test_split_pairs_on_full_board(seed):
    width, height = 6, 6
    path = serpentine(width, height)
    segmenter = PathSegmenter(RandomNumberGenerator(seed))
    result = segmenter.split_pairs(path, 4, set(path), width, height)
    assert len(result.segments) == 4
    assert [c for segment in result.segments for c in segment] == path
    assert min(result.lengths) >= 4
    assert result.pairs == [(s[0], s[-1]) for s in result.segments]
    if not result.low_quality:
        for segment in result.segments:
            assert pair_violation(segment, 0, len(segment) - 1, set(path), width, height) is None


def test_split_pairs_enforces_pair_minimum(segmenter):
    path = serpentine(4, 2)
    with pytest.raises(SegmentationConstraintUnsatisfiable):
        segmenter.split_pairs(path, 3, set(path), 4, 2, min_length=2)


def _segmenter_with_cuts(cuts, **kwargs):
    segmenter = PathSegmenter(RandomNumberGenerator("repair"), **kwargs)
    segmenter._draw_cuts = lambda n, color_count, min_length: (list(cuts), False)
    return segmenter


def test_split_pairs_moves_cut_off_a_bad_pair():
    # 3x4 serpentine cut after the second row: both segments start and end
    # on a shared open 2x2 block
    path = serpentine(3, 4)
    open_cells = set(path)
    assert pair_violation(path[:6], 0, 5, open_cells, 3, 4)

    result = _segmenter_with_cuts([6]).split_pairs(path, 2, open_cells, 3, 4)
    assert result.segments == ((0, 1, 2, 5), (4, 3, 6, 7, 8, 11, 10, 9))
    assert not result.low_quality
    for segment in result.segments:
        assert pair_violation(segment, 0, len(segment) - 1, open_cells, 3, 4) is None


def test_split_pairs_flags_low_quality_when_repairs_run_out():
    path = serpentine(3, 4)
    open_cells = set(path)
    result = _segmenter_with_cuts([6], max_pair_attempts=1).split_pairs(
        path, 2, open_cells, 3, 4)
    # one shift moved the cut but segment 0 still ends next to its start
    assert result.segments[0] == (0, 1, 2, 5, 4)
    assert result.low_quality
