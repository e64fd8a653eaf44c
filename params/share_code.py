"""Share codes: the compact `#v=1;m=1;w=10;...` form of a generation request.

Parsing never fails. Unknown keys, empty parts and values that do not parse
or validate are skipped, and a repeated key keeps its last value. Keys that
are absent take the preset for the parsed mode and difficulty, then the
registry default.
"""

from typing import Dict
import logging as log

from .params import GenerationParams
from .presets import DEFAULT_PARAMS
from .registry import ParamRegistry

DELIMITER = ";"
PREFIX = "#"


def parse_share_code(text: str) -> GenerationParams:
    """Parse a share code into a GenerationParams.

    Args:
        text: Share code, with or without the leading '#'

    Returns:
        The request the code describes
    """
    definitions = ParamRegistry.get_all_params()
    parsed: Dict[str, object] = {}
    body = (text or "").strip()
    if body.startswith(PREFIX):
        body = body[len(PREFIX):]

    for part in body.split(DELIMITER):
        key, sep, value = part.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep or not key or not value:
            continue
        definition = definitions.get(key)
        if definition is None:
            log.debug(f"Ignoring unknown share-code key '{key}'")
            continue
        try:
            parsed[key] = definition.parse(value)
        except (TypeError, ValueError) as e:
            log.debug(f"Ignoring share-code value {key}={value!r}: {e}")

    params = GenerationParams()
    for key in ("m", "diff"):
        if key in parsed:
            params.set(key, parsed[key])
    preset = DEFAULT_PARAMS.get(params.diff, {}).get(params.m, {})
    for key, value in preset.items():
        params.set(key, value)
    for key, value in parsed.items():
        params.set(key, value)
    return params


def serialize_share_code(params: GenerationParams) -> str:
    """Write every parameter in the fixed key order."""
    definitions = ParamRegistry.get_all_params()
    parts = [f"{key}={definitions[key].format(value)}"
             for key, value in params.to_dict().items()]
    return PREFIX + DELIMITER.join(parts)
