"""Parameter categories for grouping generation parameters in the CLI."""

from enum import IntEnum


class ParamCategory(IntEnum):
    """Categories for organizing generation parameters."""
    PUZZLE = 1
    BOARD = 2
    IDENTITY = 3

    @property
    def display_name(self) -> str:
        """Get user-friendly display name for the category."""
        names = {
            ParamCategory.PUZZLE: "Puzzle",
            ParamCategory.BOARD: "Board Shape",
            ParamCategory.IDENTITY: "Seed & Version",
        }
        return names.get(self, "Unknown")
