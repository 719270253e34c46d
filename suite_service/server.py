"""
suite_service.server
--------------------
A small REST API over the suite tree model, using FastAPI.

It keeps the latest backend snapshot in memory and answers the questions the
admin wizard asks about it: the normalized project trees, search results,
readable names for selected paths, and aggregated test case counts for a
team's selection. Every POST /snapshot replaces the tree wholesale.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from common.config import Settings
from suitetree import ProjectNode, StatsReport, SuiteTreeModel, load_snapshot
from suitetree.tree import count_nodes

logger = logging.getLogger(__name__)


class SnapshotSummary(BaseModel):
    projects: int
    nodes: int
    malformed: list[dict[str, Any]] = Field(default_factory=list)
    loaded_at: datetime


class DisplayNameModel(BaseModel):
    path: str
    display_name: str


class StatsRequestModel(BaseModel):
    paths: list[str] = Field(default_factory=list)


class _SnapshotStore:
    """Holds the model for the most recent snapshot."""

    def __init__(self) -> None:
        self.settings = Settings()
        self.model: SuiteTreeModel | None = None
        self.loaded_at: datetime | None = None

    def replace(self, raw_projects: list[Any]) -> SnapshotSummary:
        model = SuiteTreeModel(strict=self.settings.strict_ingest)
        model.load(raw_projects)
        self.model = model
        self.loaded_at = datetime.now(timezone.utc)
        return SnapshotSummary(
            projects=len(model.projects),
            nodes=count_nodes(model.projects),
            malformed=[error.to_dict() for error in model.errors],
            loaded_at=self.loaded_at,
        )

    def require(self) -> SuiteTreeModel:
        if self.model is None:
            raise HTTPException(status_code=404, detail="No snapshot loaded")
        return self.model


store = _SnapshotStore()
app = FastAPI(title="suitetree")


def configure(settings: Settings) -> None:
    """Apply settings and preload the configured snapshot file, if any."""
    store.settings = settings
    store.model = None
    store.loaded_at = None
    if settings.snapshot:
        summary = store.replace(load_snapshot(Path(settings.snapshot).expanduser()))
        logger.info(f"Preloaded snapshot {settings.snapshot}: {summary.projects} projects")


@app.get("/status")
def status():
    """Health/status endpoint."""
    model = store.model
    return {
        "status": "ok",
        "loaded": model is not None,
        "projects": len(model.projects) if model else 0,
        "loaded_at": store.loaded_at.isoformat() if store.loaded_at else None,
    }


@app.post("/snapshot", response_model=SnapshotSummary, status_code=201)
def post_snapshot(payload: Any = Body(...)) -> SnapshotSummary:
    """Replace the current tree with a raw backend snapshot."""
    try:
        raw_projects = load_snapshot(payload)
    except (TypeError, ValueError) as exc:
        logger.warning(f"Rejected snapshot: {exc}")
        raise HTTPException(status_code=422, detail=str(exc))
    summary = store.replace(raw_projects)
    logger.info(f"Snapshot replaced: {summary.projects} projects, {len(summary.malformed)} malformed records")
    return summary


@app.get("/projects", response_model=list[ProjectNode])
def list_projects() -> list[ProjectNode]:
    return store.require().projects


@app.get("/projects/search", response_model=list[ProjectNode])
def search_projects(q: str = "") -> list[ProjectNode]:
    """Projects and suites whose names contain ``q`` (case-insensitive), with their ancestors."""
    logger.debug(f"Search: {q!r}")
    return list(store.require().filter(q))


@app.get("/paths/display", response_model=DisplayNameModel)
def get_display_name(path: str = Query(..., min_length=1)) -> DisplayNameModel:
    model = store.require()
    return DisplayNameModel(path=path, display_name=model.display_name(path))


@app.post("/stats", response_model=StatsReport)
def post_stats(request: StatsRequestModel) -> StatsReport:
    """Aggregate test case counts for a list of selected paths."""
    report = store.require().stats(request.paths)
    logger.info(f"Stats for {len(request.paths)} paths: total={report.total}, errors={len(report.errors)}")
    return report


def run(settings: Settings) -> None:
    """Serve the API with uvicorn on the configured host and port."""
    configure(settings)
    logger.info(f"Starting Uvicorn server on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    logger.info("Server stopped")


__all__ = ["app", "configure", "run", "store"]
