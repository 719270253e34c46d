"""Pydantic models for the normalized suite tree."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import json
import yaml
from pydantic import BaseModel, Field


class CaseStats(BaseModel):
    """Per-suite test case breakdown reported by the test management backend."""

    passing: int = Field(default=0, ge=0)
    failing: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    automatable: int = Field(default=0, ge=0)
    automated: int = Field(default=0, ge=0)


class SuiteNode(BaseModel):
    """A suite with its children merged into one ordered list."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    path: str = Field(..., description="Colon-joined ids from the project down to this suite")
    test_case_count: int = Field(default=0, ge=0)
    stats: CaseStats = Field(default_factory=CaseStats)
    children: list[SuiteNode] = Field(default_factory=list)

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring test; ``needle`` must already be lowercased."""
        return needle in self.name.lower()


class ProjectNode(BaseModel):
    """Root of one suite tree. A project's path is its id."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    suites: list[SuiteNode] = Field(default_factory=list)

    @property
    def path(self) -> str:
        return self.id

    @property
    def children(self) -> list[SuiteNode]:
        return self.suites

    def matches(self, needle: str) -> bool:
        return needle in self.name.lower()
# ---------------------------------------------------------------------------
# helpers


def load_snapshot(value: Any) -> list[Any]:
    """Normalize supported inputs into a raw project list ready for ingestion.

    Accepts a sequence of records, a mapping wrapping them under ``projects``,
    YAML/JSON text or bytes, or a :class:`~pathlib.Path` to such a file.
    """
    payload: Any
    if isinstance(value, Path):
        payload = _load_text_payload(value.read_text(encoding="utf-8"))
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    else:
        payload = value
    if payload is None:
        return []
    if isinstance(payload, Mapping):
        if "projects" not in payload:
            raise ValueError("Snapshot mapping must contain a 'projects' list")
        payload = payload["projects"] or []
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        return list(payload)
    raise TypeError(f"Unsupported snapshot payload: {type(payload).__name__}")


def _load_text_payload(raw: str | bytes) -> Any:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError("Snapshot text is neither YAML nor JSON") from exc


__all__ = [
    "CaseStats",
    "ProjectNode",
    "SuiteNode",
    "load_snapshot",
]
