"""Parameter definition classes for the different value types.

Each definition validates values assigned in code and parses/formats the text
form used in share codes.
"""

from dataclasses import dataclass
from typing import Any, List
import re

from .categories import ParamCategory


@dataclass
class ParamOption:
    """Represents a single option for an enum parameter."""
    value: str
    display_name: str
    help_text: str = ""


class ParamDefinition:
    """Base class for parameter definitions."""

    def __init__(
        self,
        key: str,
        name: str,
        display_name: str,
        help_text: str,
        category: ParamCategory,
    ):
        self.key = key
        self.name = name
        self.display_name = display_name
        self.help_text = help_text
        self.category = category

    def get_default(self) -> Any:
        """Get the default value for this parameter."""
        raise NotImplementedError

    def validate(self, value: Any) -> Any:
        """Validate and convert value if needed. Returns validated value."""
        raise NotImplementedError

    def parse(self, text: str) -> Any:
        """Parse the share-code text form. Raises ValueError if unparsable."""
        return self.validate(text)

    def format(self, value: Any) -> str:
        """Share-code text form of a validated value."""
        return str(value)


class IntegerParam(ParamDefinition):
    """An integer parameter with optional range constraints."""

    def __init__(
        self,
        key: str,
        name: str,
        display_name: str,
        help_text: str,
        category: ParamCategory,
        default: int,
        min_value: int = None,
        max_value: int = None,
    ):
        super().__init__(key, name, display_name, help_text, category)
        self.default = default
        self.min_value = min_value
        self.max_value = max_value

        # Validate default is in range
        self.validate(default)

    def get_default(self) -> int:
        return self.default

    def validate(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Parameter '{self.key}' expects integer, got {type(value).__name__}")

        if self.min_value is not None and value < self.min_value:
            raise ValueError(
                f"Parameter '{self.key}' value {value} below minimum {self.min_value}"
            )
        if self.max_value is not None and value > self.max_value:
            raise ValueError(
                f"Parameter '{self.key}' value {value} above maximum {self.max_value}"
            )
        return value

    def parse(self, text: str) -> int:
        return self.validate(int(text, 10))


class FloatParam(ParamDefinition):
    """A float parameter with a closed range."""

    def __init__(
        self,
        key: str,
        name: str,
        display_name: str,
        help_text: str,
        category: ParamCategory,
        default: float,
        min_value: float,
        max_value: float,
    ):
        super().__init__(key, name, display_name, help_text, category)
        self.default = default
        self.min_value = min_value
        self.max_value = max_value
        self.validate(default)

    def get_default(self) -> float:
        return self.default

    def validate(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Parameter '{self.key}' expects a number, got {type(value).__name__}")
        value = float(value)
        if value != value:
            raise ValueError(f"Parameter '{self.key}' must not be NaN")
        if not self.min_value <= value <= self.max_value:
            raise ValueError(
                f"Parameter '{self.key}' value {value} outside "
                f"[{self.min_value}, {self.max_value}]"
            )
        return value

    def parse(self, text: str) -> float:
        return self.validate(float(text))

    def format(self, value: float) -> str:
        # repr round-trips exactly
        return repr(float(value))


class EnumParam(ParamDefinition):
    """A parameter with multiple predefined options."""

    def __init__(
        self,
        key: str,
        name: str,
        display_name: str,
        help_text: str,
        category: ParamCategory,
        options: List[ParamOption],
        default: str = None,
    ):
        super().__init__(key, name, display_name, help_text, category)
        self.options = options
        self.option_dict = {opt.value: opt for opt in options}
        # Default to first option if not specified
        self.default = default if default is not None else options[0].value

        if self.default not in self.option_dict:
            raise ValueError(f"Default value '{self.default}' not in options for parameter '{key}'")

    def get_default(self) -> str:
        return self.default

    def validate(self, value: Any) -> str:
        if not isinstance(value, str):
            value = str(value)

        if value not in self.option_dict:
            valid_options = ", ".join(self.option_dict.keys())
            raise ValueError(
                f"Parameter '{self.key}' expects one of [{valid_options}], got '{value}'"
            )
        return value


class StringParam(ParamDefinition):
    """A free-form string parameter restricted by a regular expression."""

    def __init__(
        self,
        key: str,
        name: str,
        display_name: str,
        help_text: str,
        category: ParamCategory,
        default: str,
        pattern: str,
    ):
        super().__init__(key, name, display_name, help_text, category)
        self.default = default
        self.pattern = re.compile(pattern)
        self.validate(default)

    def get_default(self) -> str:
        return self.default

    def validate(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(f"Parameter '{self.key}' expects a string, got {type(value).__name__}")
        if not self.pattern.fullmatch(value):
            raise ValueError(
                f"Parameter '{self.key}' value '{value}' does not match {self.pattern.pattern}"
            )
        return value

