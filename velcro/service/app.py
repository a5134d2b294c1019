"""FastAPI application for previewing a built site."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from ..compose import BuildError
from ..config import ConfigError, load_config
from ..logging import get_logger
from ..models import BuildReport
from ..orchestrator import Orchestrator


class BuildRequest(BaseModel):
    include_drafts: bool = False
    clean: bool = False


class BuildResponse(BaseModel):
    status: str
    output_dir: str
    written: int
    copied: int
    component_assets: int
    resolved: int
    warnings: List[str] = []
    skipped_drafts: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _summarise(report: BuildReport) -> BuildResponse:
    return BuildResponse(
        status="ok",
        output_dir=str(report.output_dir),
        written=len(report.written),
        copied=len(report.copied),
        component_assets=len(report.component_assets),
        resolved=len(report.resolved),
        warnings=[str(warning) for warning in report.warnings],
        skipped_drafts=list(report.skipped_drafts),
    )


def create_app(
    site_root: Path,
    orchestrator_factory: Callable[[], Orchestrator] = Orchestrator,
) -> FastAPI:
    """Create the FastAPI application serving ``site_root``'s output directory."""

    site_root = Path(site_root).expanduser().resolve()
    config = load_config(site_root)
    app = FastAPI(title="velcro preview", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=BuildResponse)
    async def build_site(
        payload: BuildRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> BuildResponse:
        def _run_build() -> BuildReport:
            return orchestrator.run_build(
                site_root,
                include_drafts=payload.include_drafts,
                clean=payload.clean,
            )

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_build)
        return _summarise(report)

    @app.exception_handler(BuildError)
    async def build_error_handler(_: Any, exc: BuildError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.mount(
        "/",
        StaticFiles(directory=str(config.output_path), html=True, check_dir=False),
        name="site",
    )
    return app


def run_service(
    site_root: Path,
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    build: bool = True,
    orchestrator: Orchestrator | None = None,
) -> None:  # pragma: no cover - integration path
    logger = get_logger("service")
    orchestrator = orchestrator or Orchestrator()
    if build:
        orchestrator.run_build(site_root)
    app = create_app(site_root, lambda: orchestrator)
    logger.info("Serving %s on http://%s:%d", site_root, host, port)
    uvicorn.run(app, host=host, port=port)
