"""FastAPI application exposing repository size analysis to host integrations."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, load_config
from ..models import (
    AnalysisError,
    AnalysisOutcome,
    NoRepositoryFound,
    ParseFailed,
    ProbeFailed,
)
from ..pipeline import AnalysisPipeline

_ERROR_STATUS: Dict[type, int] = {
    NoRepositoryFound: 404,
    ProbeFailed: 502,
    ParseFailed: 422,
}


class AnalyzeRequest(BaseModel):
    path: str
    strict: Optional[bool] = None
    timeout: Optional[float] = Field(default=None, gt=0)


class AnalyzeResponse(BaseModel):
    repository_path: str
    total_bytes: int
    total_formatted: str
    raw_lines: List[str]
    fields: Dict[str, int]


class HealthResponse(BaseModel):
    status: str


PipelineFactory = Callable[[AnalyzeRequest], AnalysisPipeline]


def _default_pipeline(payload: AnalyzeRequest) -> AnalysisPipeline:
    config = load_config(Path(payload.path))
    if payload.strict is not None:
        config.parser.strict = payload.strict
    if payload.timeout is not None:
        config.probe.timeout = payload.timeout
    return AnalysisPipeline.from_config(config)


def create_app(pipeline_factory: PipelineFactory = _default_pipeline) -> FastAPI:
    """Create the FastAPI application exposing gitspace analysis."""

    app = FastAPI(title="gitspace", version="1.0.0")

    async def get_pipeline_factory() -> PipelineFactory:
        return pipeline_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        factory: PipelineFactory = Depends(get_pipeline_factory),
    ) -> Any:
        pipeline = factory(payload)

        # The git subprocess blocks, so it runs on an executor thread.
        loop = asyncio.get_running_loop()
        outcome: AnalysisOutcome = await loop.run_in_executor(
            None, pipeline.analyze, payload.path
        )

        if isinstance(outcome, AnalysisError):
            status = _ERROR_STATUS.get(type(outcome), 500)
            return JSONResponse(
                status_code=status,
                content={"detail": outcome.message, "kind": outcome.kind},
            )
        return AnalyzeResponse(**outcome.to_dict())

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc), "kind": "config"})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["AnalyzeRequest", "AnalyzeResponse", "create_app", "run_service"]
