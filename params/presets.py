# params/presets.py
# Board presets per difficulty tier and mode, and fresh seed generation.

from typing import Dict, Optional
import random

SEED_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SEED_LENGTH = 8

# difficulty -> mode -> (width, height, hole density, colors)
DEFAULT_PARAMS: Dict[str, Dict[int, Dict[str, object]]] = {
    "easy": {
        1: {"w": 8, "h": 10, "hd": 0.10, "k": 1},
        2: {"w": 8, "h": 10, "hd": 0.10, "k": 3},
        3: {"w": 6, "h": 6, "hd": 0.0, "k": 4},
    },
    "medium": {
        1: {"w": 10, "h": 12, "hd": 0.15, "k": 1},
        2: {"w": 10, "h": 12, "hd": 0.15, "k": 4},
        3: {"w": 7, "h": 7, "hd": 0.0, "k": 5},
    },
    "hard": {
        1: {"w": 12, "h": 14, "hd": 0.18, "k": 1},
        2: {"w": 12, "h": 14, "hd": 0.18, "k": 6},
        3: {"w": 8, "h": 8, "hd": 0.0, "k": 7},
    },
}


def get_preset(mode: int, difficulty: str) -> Dict[str, object]:
    """Board size, hole density and color count for a tier.

    Raises:
        ValueError: If the tier or mode has no preset
    """
    try:
        return dict(DEFAULT_PARAMS[difficulty][mode])
    except KeyError:
        raise ValueError(f"No preset for mode {mode} at difficulty '{difficulty}'")


def generate_seed(source: Optional[random.Random] = None, length: int = SEED_LENGTH) -> str:
    """Return a fresh random seed string.

    This is the only non-deterministic input in the system; it is called
    before generation, never during it.

    Args:
        source: Random source (defaults to a system-entropy source)
        length: Number of characters
    """
    source = source or random.SystemRandom()
    return "".join(source.choice(SEED_ALPHABET) for _ in range(length))
