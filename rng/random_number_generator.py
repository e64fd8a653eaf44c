# rng/random_number_generator.py

from typing import List, Sequence, TypeVar, Union

T = TypeVar('T')

MASK32 = 0xFFFFFFFF
STATE_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & MASK32


def hash_seed(text: str) -> int:
    """Hash a seed string to a non-negative 32-bit integer.

    Accumulates hash*31 + code_unit over the UTF-16 code units of the text,
    wrapping to a signed 32-bit value, then drops the sign.
    """
    data = text.encode('utf-16-le')
    value = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + code_unit) & MASK32
    if value & 0x80000000:
        value -= 0x100000000
    return abs(value)


class RandomNumberGenerator:
    """Deterministic RNG for level generation.

    All randomization in the generation pipeline goes through this class
    instead of the global random module, so that a seed string always maps
    to the same sequence of draws on every platform.

    The API mirrors Python's random.Random where the two overlap.

    Usage:
        rng = RandomNumberGenerator("8f3kz2")
        value = rng.randint(1, 100)
        rng.shuffle(my_list)
    """

    def __init__(self, seed: Union[str, int]):
        """Initialize RNG with a seed.

        Args:
            seed: Seed string (hashed) or integer (used directly, masked to 32 bits)
        """
        if isinstance(seed, str):
            self._seed = hash_seed(seed)
            self._seed_text = seed
        else:
            self._seed = int(seed) & MASK32
            self._seed_text = str(seed)
        self._state = self._seed

    @property
    def seed(self) -> int:
        """Get the 32-bit seed used to initialize this RNG."""
        return self._seed

    @property
    def seed_text(self) -> str:
        """Get the seed as it was supplied."""
        return self._seed_text

    def reset(self) -> None:
        """Reset RNG to initial seeded state."""
        self._state = self._seed

    def getstate(self) -> int:
        """Return internal state; can be passed to setstate() later."""
        return self._state

    def setstate(self, state: int) -> None:
        """Restore internal state from a value returned by getstate()."""
        self._state = state & MASK32

    # ========================================================================
    # Random operation methods (mirror random.Random API)
    # ========================================================================

    def random(self) -> float:
        """Return random float in the range [0.0, 1.0)."""
        self._state = (self._state + STATE_INCREMENT) & MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / TWO_POW_32

    def randint(self, a: int, b: int) -> int:
        """Return random integer in range [a, b], including both end points."""
        if a > b:
            raise ValueError(f"empty range for randint({a}, {b})")
        return int(self.random() * (b - a + 1)) + a

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(0, len(seq) - 1)]

    def shuffle(self, x: List) -> None:
        """Shuffle list x in-place (Fisher-Yates), and return None."""
        for i in range(len(x) - 1, 0, -1):
            j = self.randint(0, i)
            x[i], x[j] = x[j], x[i]

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """Choose one item with probability proportional to its weight.

        Args:
            items: Candidates to choose from
            weights: Non-negative weight per candidate

        Raises:
            ValueError: If the inputs are empty, differ in length, or the
                weights do not sum to a positive total
        """
        if len(items) != len(weights):
            raise ValueError(
                f"items and weights must have same length. "
                f"Got {len(items)} items and {len(weights)} weights."
            )
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        total = sum(weights)
        if total <= 0:
            raise ValueError("weights must sum to a positive total")

        r = self.random() * total
        for item, weight in zip(items, weights):
            r -= weight
            if r <= 0:
                return item
        return items[-1]
