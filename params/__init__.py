"""
Generation request parameters.

Key features:
- Typed definitions (integer, float, enum, string) in one registry
- Share-code parsing that never fails, and fixed-order serialization
- Difficulty presets per mode
"""

from .categories import ParamCategory
from .definitions import EnumParam, FloatParam, IntegerParam, ParamDefinition, ParamOption, StringParam
from .registry import ParamRegistry
from .params import GenerationParams
from .presets import DEFAULT_PARAMS, generate_seed
from .share_code import parse_share_code, serialize_share_code

__all__ = [
    'ParamCategory',
    'EnumParam',
    'FloatParam',
    'IntegerParam',
    'ParamDefinition',
    'ParamOption',
    'StringParam',
    'ParamRegistry',
    'GenerationParams',
    'DEFAULT_PARAMS',
    'generate_seed',
    'parse_share_code',
    'serialize_share_code',
]
