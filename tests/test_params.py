import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from params import DEFAULT_PARAMS, GenerationParams, ParamCategory, ParamRegistry, generate_seed
from params.presets import SEED_ALPHABET, get_preset
from rng import RandomNumberGenerator


@pytest.fixture
def default_params():
    return GenerationParams()


def test_defaults(default_params):
    assert default_params.to_dict() == {
        "v": 1, "m": 1, "w": 10, "h": 12, "k": 1, "hd": 0.15, "diff": "medium", "seed": "default"}


def test_key_and_name_access(default_params):
    default_params.width = 7
    assert default_params.w == 7
    default_params.set("hd", 0.3)
    assert default_params.hole_density == 0.3
    assert default_params.get("no_such_param", "fallback") == "fallback"
    with pytest.raises(AttributeError):
        default_params.no_such_param


@pytest.mark.parametrize("key,value,error", [
    ("w", 1, ValueError),
    ("w", 41, ValueError),
    ("w", "10", TypeError),
    ("w", True, TypeError),
    ("hd", 0.95, ValueError),
    ("hd", float("nan"), ValueError),
    ("diff", "nightmare", ValueError),
    ("seed", "has spaces", ValueError),
    ("seed", "", ValueError),
    ("k", 13, ValueError),
    ("m", 4, ValueError),
    ("nope", 1, KeyError),
])
def test_invalid_values(default_params, key, value, error):
    with pytest.raises(error):
        default_params.set(key, value)


def test_integer_hole_density_becomes_float(default_params):
    default_params.hd = 0
    assert default_params.hd == 0.0
    assert isinstance(default_params.hd, float)


@pytest.mark.parametrize("values,ok", [
    ({"m": 1, "k": 1}, True),
    ({"m": 1, "k": 2}, False),
    ({"m": 2, "k": 1}, False),
    ({"m": 2, "k": 4}, True),
    ({"m": 3, "k": 5, "w": 7, "h": 7}, True),
    ({"m": 3, "k": 12, "w": 5, "h": 5}, False),
    ({"m": 2, "k": 12, "w": 5, "h": 5, "hd": 0.5}, False),
])
def test_cross_rules(values, ok):
    valid, errors = GenerationParams(**values).validate()
    assert valid is ok
    assert bool(errors) is not ok


def test_target_open_cells():
    assert GenerationParams(w=10, h=12, hd=0.15).target_open_cells == 102
    assert GenerationParams(m=3, k=2, w=10, h=12, hd=0.5).target_open_cells == 120
    assert GenerationParams(w=2, h=2, hd=0.9).target_open_cells == 1


def test_min_segment_length():
    assert GenerationParams(m=1).min_segment_length == 1
    assert GenerationParams(m=2, k=2).min_segment_length == 3
    assert GenerationParams(m=3, k=2).min_segment_length == 4


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
@pytest.mark.parametrize("mode", [1, 2, 3])
def test_every_preset_is_valid(mode, difficulty):
    params = GenerationParams.for_tier(mode, difficulty, seed="preset")
    assert params.validate() == (True, [])
    preset = DEFAULT_PARAMS[difficulty][mode]
    assert (params.w, params.h, params.k) == (preset["w"], preset["h"], preset["k"])
    assert params.m == mode
    assert params.diff == difficulty


def test_unknown_preset():
    with pytest.raises(ValueError):
        get_preset(4, "easy")


def test_for_tier_without_seed_generates_one():
    params = GenerationParams.for_tier(1)
    assert len(params.seed) == 8
    assert set(params.seed) <= set(SEED_ALPHABET)


def test_generate_seed_from_source():
    class Source:
        def __init__(self):
            self.rng = RandomNumberGenerator("seed source")

        def choice(self, seq):
            return self.rng.choice(seq)

    assert generate_seed(Source(), length=12) == generate_seed(Source(), length=12)


def test_copy_and_equality(default_params):
    clone = default_params.copy(w=6)
    assert clone.w == 6
    assert default_params.w == 10
    assert clone != default_params
    assert clone.copy(w=10) == default_params


def test_from_dict_skips_bad_values():
    params = GenerationParams.from_dict({"w": 8, "h": 99, "bogus": 1, "seed": "ok"})
    assert params.w == 8
    assert params.h == 12
    assert params.seed == "ok"


def test_registry_lookup_and_categories():
    assert ParamRegistry.get_param("hole_density").key == "hd"
    assert ParamRegistry.get_param("hd").name == "hole_density"
    assert ParamRegistry.get_param("missing") is None
    assert list(ParamRegistry.get_all_params()) == ["v", "m", "w", "h", "k", "hd", "diff", "seed"]

    by_category = ParamRegistry.get_params_by_category()
    assert [p.key for p in by_category[ParamCategory.BOARD]] == ["w", "h", "hd"]
    assert ParamCategory.PUZZLE.display_name
