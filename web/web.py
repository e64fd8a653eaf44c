"""Web entry point: serves levels and checks player solutions over HTTP."""
import logging as log
import os
import sys
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

# Add parent directory to path to import the blockfill packages
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from blockfill.errors import BlockfillError, GenerationTimeout
from blockfill.generator import GeneratorConfig, LevelGenerator
from blockfill.level import Level
from blockfill.validator import Validator
from params import parse_share_code
from version import __version__

app = FastAPI(title="Blockfill", version=__version__)
generator = LevelGenerator(GeneratorConfig.from_env())


class ValidateRequest(BaseModel):
    code: str
    paths: Dict[str, List[int]]


def _generate(code: str) -> Level:
    try:
        params = parse_share_code(code)
        return generator.generate(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationTimeout as e:
        log.warning(f"Timed out generating {code}: {e}")
        raise HTTPException(status_code=504, detail=str(e))
    except BlockfillError as e:
        log.error(f"Failed to generate {code}: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "version": __version__}


@app.get("/api/level")
def get_level(code: str) -> Dict[str, Any]:
    """Generate the level for a share code.

    The response carries the canonical share code next to the level, so a
    client that sent a partial code learns the full one.
    """
    level = _generate(code)
    return {"code": parse_share_code(code).to_share_code(), "level": level.to_dict()}


@app.post("/api/validate")
def validate_paths(body: ValidateRequest) -> Dict[str, Any]:
    """Check a player's paths against the level for a share code.

    The level is regenerated from the code rather than trusted from the
    client.
    """
    level = _generate(body.code)
    validator = Validator(level)
    return {
        "report": validator.validate(body.paths).to_dict(),
        "progress": validator.progress(body.paths).to_dict(),
    }


if __name__ == "__main__":
    # Configure logging
    log.basicConfig(
        level=log.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    import uvicorn

    port = int(os.environ.get("PORT", 8080))
    log.info(f"Starting Blockfill API on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
