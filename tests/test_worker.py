import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from blockfill.generator import GeneratorConfig, LevelGenerator
from blockfill.worker import GenerationWorker, handle_message

CODE = "#v=1;m=2;w=6;h=6;k=3;hd=0.0;diff=easy;seed=worker"


@pytest.fixture
def generator():
    return LevelGenerator(GeneratorConfig(time_budget=None))


def test_generate(generator):
    response = handle_message({"type": "generate", "code": CODE, "id": 7}, generator)
    assert response["type"] == "generated"
    assert response["id"] == 7
    assert response["level"]["mode"] == 2
    assert len(response["level"]["solution"]) == 3


def test_generate_from_params(generator):
    message = {"type": "generate", "params": {"m": 1, "w": 4, "h": 4, "hd": 0.0, "seed": "p"}}
    response = handle_message(message, generator)
    assert response["type"] == "generated"
    assert len(response["level"]["solution"]) == 16


def test_validate_regenerates_from_code(generator):
    level = handle_message({"type": "generate", "code": CODE}, generator)["level"]
    response = handle_message(
        {"type": "validate", "code": CODE, "paths": level["solution"]}, generator)
    assert response["type"] == "validated"
    assert response["report"]["valid"]


def test_validate_given_level(generator):
    level = handle_message({"type": "generate", "code": CODE}, generator)["level"]
    paths = dict(level["solution"])
    paths["0"] = paths["0"][:-1]
    response = handle_message({"type": "validate", "level": level, "paths": paths}, generator)
    assert not response["report"]["valid"]
    assert response["report"]["uncoveredCells"]


@pytest.mark.parametrize("solver", ["backtracking", "cp_sat"])
def test_solve(generator, solver):
    response = handle_message({"type": "solve", "code": CODE, "solver": solver}, generator)
    assert response["type"] == "solved"
    assert response["result"]["status"] == "solved"


@pytest.mark.parametrize("message,kind", [
    ({"type": "explode"}, "ValueError"),
    ({"type": "generate"}, "KeyError"),
    ({"type": "generate", "code": "#m=1;k=4"}, "ValueError"),
    ({"type": "solve", "code": CODE, "solver": "magic"}, "ValueError"),
])
def test_errors_become_responses(generator, message, kind):
    response = handle_message(message, generator)
    assert response["type"] == "error"
    assert response["kind"] == kind
    assert response["error"]


def test_worker_thread_round_trip(generator):
    with GenerationWorker(generator) as worker:
        first = worker.submit({"type": "generate", "code": CODE})
        second = worker.submit({"type": "explode"})
        responses = [worker.get(timeout=30), worker.get(timeout=30)]
    assert [r["id"] for r in responses] == [first, second]
    assert responses[0]["type"] == "generated"
    assert responses[1]["type"] == "error"


def test_worker_stop_is_idempotent(generator):
    worker = GenerationWorker(generator)
    worker.start()
    worker.start()
    worker.stop(timeout=5)
    worker.stop(timeout=5)


def test_validate_with_list_paths_is_an_error(generator):
    response = handle_message({"type": "validate", "code": CODE, "paths": [[0, 1]]}, generator)
    assert response["type"] == "error"
    assert response["kind"] == "TypeError"


def test_unexpected_errors_become_responses(generator, monkeypatch):
    def broken_generate(params):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(generator, "generate", broken_generate)
    response = handle_message({"type": "generate", "code": CODE}, generator)
    assert response == {"type": "error", "error": "disk on fire", "kind": "RuntimeError"}


def test_worker_survives_bad_request(generator):
    with GenerationWorker(generator) as worker:
        bad = worker.submit({"type": "validate", "code": CODE, "paths": [[0, 1]]})
        good = worker.submit({"type": "generate", "code": CODE})
        responses = [worker.get(timeout=30), worker.get(timeout=30)]
        assert worker._thread.is_alive()
    assert [r["id"] for r in responses] == [bad, good]
    assert responses[0]["type"] == "error"
    assert responses[1]["type"] == "generated"
