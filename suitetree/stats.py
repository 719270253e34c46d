"""Aggregate test case statistics over a set of selected suite paths."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pydantic import BaseModel, Field

from .models import ProjectNode, SuiteNode
from .paths import split_path
from .tree import find_node

logger = logging.getLogger(__name__)

BACKEND_KEYS = {
    "total": "Total_Test_Cases",
    "passing": "Passing_Test_Cases",
    "failing": "Failing_Test_Cases",
    "skipped": "Skipped_Test_Cases",
    "automated": "Automated_Test_Cases",
    "automatable": "Automatable_Test_Cases",
}


class StatsReport(BaseModel):
    """Summed counts for the suites behind a list of paths."""

    total: int = 0
    passing: int = 0
    failing: int = 0
    skipped: int = 0
    automated: int = 0
    automatable: int = 0
    resolved: list[str] = Field(default_factory=list, description="Paths that contributed counts")
    errors: list[str] = Field(default_factory=list, description="One message per path that did not resolve")

    def add(self, suite: SuiteNode) -> None:
        self.total += suite.test_case_count
        self.passing += suite.stats.passing
        self.failing += suite.stats.failing
        self.skipped += suite.stats.skipped
        self.automated += suite.stats.automated
        self.automatable += suite.stats.automatable
        self.resolved.append(suite.path)

    def as_backend_dict(self) -> dict[str, int]:
        """Counts keyed the way the test management backend names them."""
        return {backend: getattr(self, attr) for attr, backend in BACKEND_KEYS.items()}


def aggregate_stats(projects: Sequence[ProjectNode] | None, paths: Iterable[str]) -> StatsReport:
    """Sum the counts of every suite addressed by ``paths``.

    Overlapping selections (a suite and one of its ancestors) are each counted.
    Paths that do not resolve are reported in ``errors``; this never raises.
    """
    report = StatsReport()
    for path in paths:
        parts = split_path(path)
        if len(parts) < 2:
            report.errors.append(f"Invalid path: {path}")
            continue
        if find_node(projects, parts[0]) is None:
            report.errors.append(f"No project found for projectId={parts[0]}")
            continue
        node = find_node(projects, path)
        if not isinstance(node, SuiteNode):
            report.errors.append(f"Path {path} not found under projectId={parts[0]}")
            continue
        report.add(node)
    if report.errors:
        logger.info(f"Stats aggregation skipped {len(report.errors)} unresolved paths")
    return report


__all__ = ["BACKEND_KEYS", "StatsReport", "aggregate_stats"]
