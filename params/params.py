"""GenerationParams class for managing a generation request with validation."""

from typing import Any, Dict, List, Optional, Tuple
import logging as log
import math

from .definitions import ParamDefinition
from .presets import generate_seed, get_preset
from .registry import MIN_SEGMENT_LENGTH, ParamRegistry


class GenerationParams:
    """Container for one generation request.

    Values are reachable by share-code key or by name, so `params.w` and
    `params.width` are the same value. Every assignment is validated by the
    parameter's definition; cross-parameter rules are checked by validate().
    """

    def __init__(self, **values: Any):
        # Initialize all parameters with their default values
        self._definitions = ParamRegistry.get_all_params()
        self._values: Dict[str, Any] = {
            key: defn.get_default()
            for key, defn in self._definitions.items()
        }
        for key, value in values.items():
            self.set(key, value)

    @classmethod
    def for_tier(cls, mode: int, difficulty: str = "medium",
                 seed: Optional[str] = None) -> "GenerationParams":
        """Preset request for a mode and difficulty tier.

        Args:
            mode: 1, 2 or 3
            difficulty: 'easy', 'medium' or 'hard'
            seed: Seed string; a fresh random one when omitted
        """
        params = cls(m=mode, diff=difficulty, seed=seed or generate_seed())
        for key, value in get_preset(mode, difficulty).items():
            params.set(key, value)
        return params

    def __getattr__(self, key: str) -> Any:
        """Access values as attributes: params.width or params.w"""
        if key.startswith('_'):
            # Allow normal attribute access for private attributes
            return object.__getattribute__(self, key)

        definition = self._resolve(key)
        if definition is not None:
            return self._values[definition.key]

        raise AttributeError(f"Parameter '{key}' not found")

    def __setattr__(self, key: str, value: Any):
        """Set values as attributes: params.width = 12"""
        if key.startswith('_'):
            object.__setattr__(self, key, value)
            return

        self.set(key, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenerationParams):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"GenerationParams({inner})"

    def _resolve(self, key: str) -> Optional[ParamDefinition]:
        if key in self._definitions:
            return self._definitions[key]
        return ParamRegistry.get_param(key)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by key or name, with optional default."""
        definition = self._resolve(key)
        if definition is None:
            return default
        return self._values[definition.key]

    def set(self, key: str, value: Any) -> None:
        """Set a value by key or name, with validation."""
        definition = self._resolve(key)
        if definition is None:
            raise KeyError(f"Parameter '{key}' not found.")
        self._values[definition.key] = definition.validate(value)

    def copy(self, **changes: Any) -> "GenerationParams":
        """A copy with some values replaced."""
        clone = GenerationParams(**self._values)
        for key, value in changes.items():
            clone.set(key, value)
        return clone

    def to_dict(self) -> Dict[str, Any]:
        """Export values keyed by share-code key, in share-code order."""
        return dict(self._values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationParams":
        """Import values, skipping any that are unknown or invalid."""
        params = cls()
        for key, value in data.items():
            try:
                params.set(key, value)
            except (KeyError, TypeError, ValueError) as e:
                log.warning(f"Failed to set parameter '{key}': {e}")
        return params

    def to_share_code(self) -> str:
        from .share_code import serialize_share_code
        return serialize_share_code(self)

    @property
    def min_segment_length(self) -> int:
        return MIN_SEGMENT_LENGTH[self.m]

    @property
    def target_open_cells(self) -> int:
        """Open cells to grow; mode 3 always uses the full rectangle."""
        total = self.w * self.h
        if self.m == 3:
            return total
        return max(1, math.floor(total * (1 - self.hd)))

    def validate(self) -> Tuple[bool, List[str]]:
        """Check the rules that involve more than one parameter.

        Returns:
            (ok, errors)
        """
        errors = []
        if self.m == 1 and self.k != 1:
            errors.append(f"Mode 1 draws a single path, so colors must be 1 (got {self.k})")
        if self.m in (2, 3) and self.k < 2:
            errors.append(f"Mode {self.m} needs at least 2 colors (got {self.k})")
        needed = self.k * self.min_segment_length
        if self.target_open_cells < needed:
            errors.append(
                f"A {self.w}x{self.h} board with hole density {self.hd} has "
                f"{self.target_open_cells} open cells; {self.k} colors need at least {needed}")
        return not errors, errors

    def get_all_definitions(self) -> Dict[str, ParamDefinition]:
        """Get all parameter definitions."""
        return self._definitions.copy()
