"""Central registry of all generation parameter definitions."""

from typing import Dict, List, Optional

from version import LEVEL_FORMAT_VERSION

from .categories import ParamCategory
from .definitions import EnumParam, FloatParam, IntegerParam, ParamDefinition, ParamOption, StringParam

MIN_SIDE = 2
MAX_SIDE = 40
MAX_COLORS = 12
MAX_HOLE_DENSITY = 0.9
SEED_PATTERN = r"[0-9A-Za-z_-]{1,64}"

# Minimum cells per colored segment, by mode
MIN_SEGMENT_LENGTH = {1: 1, 2: 3, 3: 4}

# Share-code key order
KEY_ORDER = ("v", "m", "w", "h", "k", "hd", "diff", "seed")


class ParamRegistry:
    """Central registry of all generation parameter definitions."""

    VERSION = IntegerParam(
        'v', 'version',
        'Level Format Version',
        'Version of the generation algorithm the share code was made with.',
        ParamCategory.IDENTITY,
        default=LEVEL_FORMAT_VERSION,
        min_value=1,
        max_value=LEVEL_FORMAT_VERSION
    )

    MODE = IntegerParam(
        'm', 'mode',
        'Mode',
        '1: one path through the whole region. 2: K colored paths, each through its '
        'start cell. 3: K colored pairs on a full rectangle.',
        ParamCategory.PUZZLE,
        default=1,
        min_value=1,
        max_value=3
    )

    WIDTH = IntegerParam(
        'w', 'width',
        'Width',
        'Board width in cells.',
        ParamCategory.BOARD,
        default=10,
        min_value=MIN_SIDE,
        max_value=MAX_SIDE
    )

    HEIGHT = IntegerParam(
        'h', 'height',
        'Height',
        'Board height in cells.',
        ParamCategory.BOARD,
        default=12,
        min_value=MIN_SIDE,
        max_value=MAX_SIDE
    )

    COLORS = IntegerParam(
        'k', 'colors',
        'Colors',
        'Number of colored paths. Must be 1 in mode 1 and at least 2 otherwise.',
        ParamCategory.PUZZLE,
        default=1,
        min_value=1,
        max_value=MAX_COLORS
    )

    HOLE_DENSITY = FloatParam(
        'hd', 'hole_density',
        'Hole Density',
        'Fraction of the rectangle left blocked. Ignored in mode 3.',
        ParamCategory.BOARD,
        default=0.15,
        min_value=0.0,
        max_value=MAX_HOLE_DENSITY
    )

    DIFFICULTY = EnumParam(
        'diff', 'difficulty',
        'Difficulty',
        'Difficulty tier; selects the preset board size and color count.',
        ParamCategory.PUZZLE,
        options=[
            ParamOption('easy', 'Easy', 'Small boards, few colors'),
            ParamOption('medium', 'Medium', 'Medium boards'),
            ParamOption('hard', 'Hard', 'Large boards, many colors'),
        ],
        default='medium'
    )

    SEED = StringParam(
        'seed', 'seed',
        'Seed',
        'Seed string. The same seed and parameters always give the same level.',
        ParamCategory.IDENTITY,
        default='default',
        pattern=SEED_PATTERN
    )

    @classmethod
    def get_all_params(cls) -> Dict[str, ParamDefinition]:
        """Get all parameter definitions keyed by share-code key, in share-code order."""
        found = {}
        for attr_name in dir(cls):
            attr = getattr(cls, attr_name)
            if isinstance(attr, ParamDefinition):
                found[attr.key] = attr
        return {key: found[key] for key in KEY_ORDER}

    @classmethod
    def get_param(cls, key_or_name: str) -> Optional[ParamDefinition]:
        """Look a definition up by share-code key ('w') or name ('width')."""
        for definition in cls.get_all_params().values():
            if key_or_name in (definition.key, definition.name):
                return definition
        return None

    @classmethod
    def get_params_by_category(cls) -> Dict[ParamCategory, List[ParamDefinition]]:
        """Get parameters organized by category."""
        by_category = {}
        for param in cls.get_all_params().values():
            if param.category not in by_category:
                by_category[param.category] = []
            by_category[param.category].append(param)
        return by_category
