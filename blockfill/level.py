"""The generated level value and its canonical JSON form."""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, NamedTuple, Optional, Tuple
import json

from version import LEVEL_FORMAT_VERSION

from . import grid
from .metrics import DifficultyMetrics


class Start(NamedTuple):
    color: int
    index: int


class Pair(NamedTuple):
    color: int
    a: int
    b: int


@dataclass(frozen=True)
class Level:
    """An immutable generated level.

    `open` is the 0/1 mask over all width*height cells. `solution` holds one
    path per color, in color order. `params` is the generation request as
    its share-code items, sorted by key (a mapping passed in is converted),
    and `attempt` is the retry that produced the level (0 for the request
    seed itself).
    """

    mode: int
    width: int
    height: int
    open: Tuple[int, ...]
    starts: Tuple[Start, ...]
    solution: Tuple[Tuple[int, ...], ...]
    metrics: DifficultyMetrics
    seed: str
    pairs: Tuple[Pair, ...] = ()
    params: Tuple[Tuple[str, Any], ...] = ()
    attempt: int = 0
    low_quality: bool = False
    version: int = LEVEL_FORMAT_VERSION

    def __post_init__(self):
        items = self.params.items() if isinstance(self.params, Mapping) else self.params
        object.__setattr__(self, "params", tuple(sorted(items)))

    @property
    def open_cells(self) -> FrozenSet[int]:
        return frozenset(grid.mask_to_cells(self.open))

    @property
    def color_count(self) -> int:
        return len(self.solution)

    def solution_paths(self) -> Dict[int, List[int]]:
        """The solution as a color -> path mapping, as the validator takes it."""
        return {color: list(path) for color, path in enumerate(self.solution)}

    def directions(self, color: int = 0) -> List[int]:
        """One color's solution as step codes (0=up, 1=right, 2=down, 3=left)."""
        return grid.path_to_directions(self.solution[color], self.width)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "mode": self.mode,
            "width": self.width,
            "height": self.height,
            "open": list(self.open),
            "starts": [{"color": s.color, "index": s.index} for s in self.starts],
            "metrics": self.metrics.to_dict(),
            "seed": self.seed,
            "params": dict(self.params),
            "attempt": self.attempt,
            "lowQuality": self.low_quality,
        }
        if self.mode == 1:
            data["solution"] = list(self.solution[0])
        else:
            data["solution"] = {str(c): list(p) for c, p in enumerate(self.solution)}
        if self.mode == 3:
            data["pairs"] = [{"color": p.color, "a": p.a, "b": p.b} for p in self.pairs]
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        """Canonical JSON; identical levels give identical strings."""
        if indent is not None:
            return json.dumps(self.to_dict(), sort_keys=True, indent=indent)
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Level":
        solution = data["solution"]
        if isinstance(solution, dict):
            paths = tuple(tuple(solution[key]) for key in sorted(solution, key=int))
        else:
            paths = (tuple(solution),)
        return cls(
            version=data.get("version", LEVEL_FORMAT_VERSION),
            mode=data["mode"],
            width=data["width"],
            height=data["height"],
            open=tuple(data["open"]),
            starts=tuple(Start(s["color"], s["index"]) for s in data.get("starts", [])),
            pairs=tuple(Pair(p["color"], p["a"], p["b"]) for p in data.get("pairs", [])),
            solution=paths,
            metrics=DifficultyMetrics.from_dict(data["metrics"]),
            seed=data["seed"],
            params=data.get("params", {}),
            attempt=data.get("attempt", 0),
            low_quality=data.get("lowQuality", False),
        )

    @classmethod
    def from_json(cls, text: str) -> "Level":
        return cls.from_dict(json.loads(text))
