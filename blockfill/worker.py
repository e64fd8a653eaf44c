"""
Generation Worker
=================
Runs generation, validation and solving off the calling thread.

Requests and responses are plain dicts so they can cross any boundary
(thread queue, HTTP, JSON file). Every entry point goes through
handle_message(), so the worker, the CLI and the web API share one
implementation.

Request types and their responses:
- {"type": "generate", "code": "#v=1;..."}             -> {"type": "generated", "level": {...}}
- {"type": "validate", "code": ..., "paths": {...}}    -> {"type": "validated", "report": {...}}
- {"type": "solve", "code": ..., "solver": "cp_sat"}   -> {"type": "solved", "result": {...}}
Failures produce {"type": "error", "error": message, "kind": exception class}.
"""

from typing import Any, Dict, Optional
import itertools
import logging as log
import queue
import threading

from params import GenerationParams, parse_share_code

from .errors import BlockfillError
from .generator import GeneratorConfig, LevelGenerator
from .level import Level
from .solvers import SolverType, create_solver
from .validator import Validator


def _params_from(message: Dict[str, Any]) -> GenerationParams:
    if "code" in message:
        return parse_share_code(message["code"])
    if "params" in message:
        return GenerationParams(**message["params"])
    raise KeyError("message needs a 'code' or 'params' field")


def _level_from(message: Dict[str, Any], generator: LevelGenerator) -> Level:
    if "level" in message:
        return Level.from_dict(message["level"])
    return generator.generate(_params_from(message))


def handle_message(message: Dict[str, Any],
                   generator: Optional[LevelGenerator] = None) -> Dict[str, Any]:
    """Process one request dict and return its response dict. Never raises;
    every failure becomes an "error" response."""
    generator = generator or LevelGenerator(GeneratorConfig.from_env())
    kind = message.get("type")
    response: Dict[str, Any]
    try:
        if kind == "generate":
            level = generator.generate(_params_from(message))
            response = {"type": "generated", "level": level.to_dict()}
        elif kind == "validate":
            level = _level_from(message, generator)
            report = Validator(level).validate(message.get("paths", {}))
            response = {"type": "validated", "report": report.to_dict()}
        elif kind == "solve":
            level = _level_from(message, generator)
            solver_kwargs = {}
            if "max_expansions" in message:
                solver_kwargs["max_expansions"] = message["max_expansions"]
            solver = create_solver(SolverType(message.get("solver", "backtracking")),
                                   **solver_kwargs)
            result = solver.solve(level, time_limit_seconds=message.get("time_limit", 10.0))
            response = {"type": "solved", "result": result.to_dict()}
        else:
            raise ValueError(f"Unknown message type: {kind!r}")
    except (BlockfillError, KeyError, TypeError, ValueError) as e:
        log.error(f"{kind or 'message'} failed: {e}")
        response = {"type": "error", "error": str(e), "kind": type(e).__name__}
    except Exception as e:
        log.exception(f"Unexpected failure handling {kind or 'message'}")
        response = {"type": "error", "error": str(e), "kind": type(e).__name__}

    if "id" in message:
        response["id"] = message["id"]
    return response


class GenerationWorker:
    """
    Background thread that serves request dicts from a queue.

    Usage:
        with GenerationWorker() as worker:
            request_id = worker.submit({"type": "generate", "code": "#m=1;seed=abc"})
            response = worker.get(timeout=5.0)

    Responses come back in request order; each carries the "id" assigned by
    submit(). Results the caller no longer wants can simply be dropped.
    """

    def __init__(self, generator: Optional[LevelGenerator] = None):
        self.generator = generator or LevelGenerator(GeneratorConfig.from_env())
        self.requests: queue.Queue = queue.Queue()
        self.responses: queue.Queue = queue.Queue()
        self.stop_event = threading.Event()
        self._ids = itertools.count(1)
        self._thread: Optional[threading.Thread] = None

    # ── Public API ─────────────────────────────────────────────

    def start(self) -> None:
        """Launch the worker in a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self.stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="blockfill-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the worker to stop after the current request."""
        self.stop_event.set()
        self.requests.put(None)
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def submit(self, message: Dict[str, Any]) -> int:
        """Queue a request and return its id."""
        message = dict(message)
        message.setdefault("id", next(self._ids))
        self.requests.put(message)
        return message["id"]

    def get(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Wait for the next response. Raises queue.Empty on timeout."""
        return self.responses.get(timeout=timeout)

    def __enter__(self) -> "GenerationWorker":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop(timeout=5.0)

    # ── Internal ───────────────────────────────────────────────

    def _run(self) -> None:
        while not self.stop_event.is_set():
            message = self.requests.get()
            if message is None:
                break
            log.debug(f"Worker handling {message.get('type')} request {message.get('id')}")
            self.responses.put(handle_message(message, self.generator))
