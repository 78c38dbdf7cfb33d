"""FastAPI application exposing lookup, reindex and regenerate."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from tagjump.core.config import AppConfig
from tagjump.core.errors import AlreadyRunning, GenerationError, ParseError
from tagjump.tags import TagsEngine
from tagjump.tools.ctags_tools import GenerationArgs

CONFIG_PATH = os.getenv("TAGJUMP_API_CONFIG", "tagjump.yaml")
WORKSPACE_ROOT = os.getenv("TAGJUMP_WORKSPACE_ROOT")

logger = logging.getLogger(__name__)


class RegenerateRequest(BaseModel):
    languages: Optional[List[str]] = None
    exclude_patterns: Optional[List[str]] = None
    timeout_sec: Optional[float] = None


def _index_summary(engine: TagsEngine) -> dict:
    status = engine.status()
    return {"generation": status["generation"], "symbols": status["symbols"], "records": status["records"]}


def create_app(engine: TagsEngine) -> FastAPI:
    app = FastAPI(title="tagjump", version="0.1.0")
    app.state.engine = engine

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/status")
    def status() -> dict:
        return engine.status()

    @app.get("/definitions/{symbol}")
    def definitions(symbol: str, language: Optional[str] = None) -> List[dict]:
        if language:
            locations = engine.definitions(language, symbol)
        else:
            locations = engine.lookup(symbol)
        return [{"path": str(loc.path), "lineno": loc.lineno} for loc in locations]

    @app.post("/reindex")
    def reindex() -> dict:
        try:
            engine.reindex()
        except AlreadyRunning as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ParseError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"status": "loaded", **_index_summary(engine)}

    @app.post("/regenerate")
    def regenerate(payload: Optional[RegenerateRequest] = None) -> dict:
        payload = payload or RegenerateRequest()
        gen_cfg = engine.config.generator
        args = GenerationArgs.build(
            payload.languages if payload.languages is not None else gen_cfg.languages,
            payload.exclude_patterns
            if payload.exclude_patterns is not None
            else gen_cfg.exclude_patterns,
        )
        logger.info("API: regenerate %s", args.describe())
        try:
            engine.regenerate(args, timeout_sec=payload.timeout_sec)
        except AlreadyRunning as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except GenerationError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"status": "generated", **_index_summary(engine)}

    return app


def build_default_app() -> FastAPI:
    logging.basicConfig(level=logging.INFO)
    engine = TagsEngine(AppConfig.load(CONFIG_PATH, root=WORKSPACE_ROOT))
    try:
        engine.activate()
    except (GenerationError, AlreadyRunning) as exc:
        logger.warning("Starting without a tags index: %s", exc)
    return create_app(engine)
