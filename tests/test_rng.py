import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from rng import RandomNumberGenerator
from rng.random_number_generator import hash_seed


def test_hash_seed_known_values():
    assert hash_seed("") == 0
    assert hash_seed("a") == 97
    assert hash_seed("ab") == 97 * 31 + 98


def test_hash_seed_drops_sign():
    # Long strings overflow into the sign bit; the result is still non-negative
    assert all(hash_seed(s) >= 0 for s in ["zzzzzzzzzzzz", "8f3kz2" * 10, "seed-" + "x" * 40])


@pytest.mark.parametrize("seed", ["8f3kz2", "abc123", 0, 12345])
def test_same_seed_same_sequence(seed):
    a = RandomNumberGenerator(seed)
    b = RandomNumberGenerator(seed)
    assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]


def test_different_seeds_differ():
    a = RandomNumberGenerator("alpha")
    b = RandomNumberGenerator("beta")
    assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]


def test_integer_seed_is_masked():
    rng = RandomNumberGenerator(2 ** 32 + 5)
    assert rng.seed == 5
    assert rng.seed_text == str(2 ** 32 + 5)


def test_random_range():
    rng = RandomNumberGenerator("range")
    values = [rng.random() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_randint_bounds_inclusive():
    rng = RandomNumberGenerator("dice")
    values = {rng.randint(1, 6) for _ in range(500)}
    assert values == {1, 2, 3, 4, 5, 6}


def test_randint_empty_range():
    with pytest.raises(ValueError):
        RandomNumberGenerator(1).randint(5, 4)


def test_reset_and_state():
    rng = RandomNumberGenerator("state")
    first = [rng.random() for _ in range(5)]
    state = rng.getstate()
    after = [rng.random() for _ in range(5)]

    rng.setstate(state)
    assert [rng.random() for _ in range(5)] == after
    rng.reset()
    assert [rng.random() for _ in range(5)] == first


def test_shuffle_is_permutation():
    rng = RandomNumberGenerator("shuffle")
    items = list(range(20))
    rng.shuffle(items)
    assert sorted(items) == list(range(20))


def test_choice_empty():
    with pytest.raises(IndexError):
        RandomNumberGenerator(1).choice([])


def test_weighted_choice_skips_zero_weights():
    rng = RandomNumberGenerator("weights")
    picks = {rng.weighted_choice(["a", "b", "c"], [0.0, 1.0, 0.0]) for _ in range(100)}
    assert picks == {"b"}


@pytest.mark.parametrize("items,weights", [
    ([], []),
    (["a"], [1.0, 2.0]),
    (["a", "b"], [0.0, 0.0]),
])
def test_weighted_choice_rejects_bad_input(items, weights):
    with pytest.raises(ValueError):
        RandomNumberGenerator(1).weighted_choice(items, weights)
