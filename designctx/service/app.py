"""FastAPI application entrypoint for designctx service mode."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..analyzers.complexity import ComplexityAnalyzer, ComplexityReport
from ..config import load_config
from ..models import DesignDocument
from ..orchestrator import ContextOrchestrator


class ContextRequest(BaseModel):
    document: Dict[str, Any]
    options: Dict[str, Any] = Field(default_factory=dict)


class ComplexityRequest(BaseModel):
    document: Dict[str, Any]
    tech_stack: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> ContextOrchestrator:
    return ContextOrchestrator(load_config(Path.cwd()))


def create_app(
    orchestrator_factory: Callable[[], ContextOrchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing context extraction."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        orchestrator = orchestrator_factory()
        await orchestrator.connect()
        app.state.orchestrator = orchestrator
        try:
            yield
        finally:
            await orchestrator.close()

    app = FastAPI(title="designctx Service", version="1.0.0", lifespan=lifespan)

    async def get_orchestrator(request: Request) -> ContextOrchestrator:
        # One orchestrator per app so the context cache survives across requests.
        return request.app.state.orchestrator

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/context")
    async def extract_context(
        payload: ContextRequest,
        orchestrator: ContextOrchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        context = await orchestrator.extract_context(payload.document, payload.options or None)
        return context.to_dict()

    @app.post("/complexity")
    async def analyze_complexity(payload: ComplexityRequest) -> Dict[str, Any]:
        def _run_analysis() -> ComplexityReport:
            document = DesignDocument.from_dict(payload.document)
            return ComplexityAnalyzer().analyze_complexity(document, payload.tech_stack)

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_analysis)
        return report.to_dict()

    @app.get("/metrics")
    async def metrics(
        orchestrator: ContextOrchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        return orchestrator.health_status()

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    try:
        import uvicorn
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
