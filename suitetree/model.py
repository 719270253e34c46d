"""
suitetree.model
---------------
``SuiteTreeModel`` binds the current backend snapshot to a caller-owned
:class:`TreeState` and exposes everything a tree widget needs: the normalized
projects, search, display names, expansion and selection.

Every ``load`` replaces the tree wholesale. Selection and expansion are kept
by path string, so they carry over to the new tree.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Iterable, Sequence

from .errors import MalformedRecordError
from .ingest import ingest
from .models import ProjectNode
from .state import TreeState
from .stats import StatsReport, aggregate_stats
from .tree import Node, display_name, filter_projects, find_node

logger = logging.getLogger(__name__)

FILTER_CACHE_SIZE = 64


class SuiteTreeModel:
    """Tree model for one selector instance.

    Args:
        state: expansion/selection state owned by the caller. A fresh one is
            created when omitted.
        strict: collect dropped records in :attr:`errors` instead of only
            logging them.
    """

    def __init__(self, state: TreeState | None = None, strict: bool = False):
        self.state = state if state is not None else TreeState()
        self.strict = strict
        self.projects: list[ProjectNode] = []
        self.errors: list[MalformedRecordError] = []
        self._source: Any = None
        self._filter_cache: OrderedDict[str, tuple[ProjectNode, ...]] = OrderedDict()

    def load(self, raw_projects: Iterable[Any] | None) -> list[ProjectNode]:
        """Replace the tree with a freshly ingested snapshot."""
        errors: list[MalformedRecordError] | None = [] if self.strict else None
        projects = ingest(raw_projects, errors=errors)
        self.projects = projects
        self.errors = errors or []
        self._filter_cache.clear()
        if raw_projects is not self._source:
            self.state.reset_expansion(projects)
        else:
            self.state.reconcile()
        self._source = raw_projects
        logger.info(f"Loaded snapshot: {len(projects)} projects, {len(self.state.selected)} selected paths")
        return projects

    def filter(self, query: str | None) -> Sequence[ProjectNode]:
        """Filtered projects for ``query``; an empty query gives :attr:`projects`.

        Results for the last FILTER_CACHE_SIZE queries are kept as tuples
        until the next ``load``.
        """
        if not query:
            return filter_projects(self.projects, query)
        cached = self._filter_cache.get(query)
        if cached is not None:
            self._filter_cache.move_to_end(query)
            return cached
        result = tuple(filter_projects(self.projects, query))
        self._filter_cache[query] = result
        if len(self._filter_cache) > FILTER_CACHE_SIZE:
            self._filter_cache.popitem(last=False)
        return result

    def display_name(self, path: str) -> str:
        return display_name(self.projects, path)

    def find(self, path: str) -> Node | None:
        return find_node(self.projects, path)

    def is_expanded(self, path: str) -> bool:
        return self.state.is_expanded(path)

    def toggle_expand(self, path: str) -> bool:
        return self.state.toggle_expand(path)

    def is_selected(self, path: str) -> bool:
        return self.state.is_selected(path)

    def get_selection(self) -> list[str]:
        return self.state.get_selection()

    def toggle_selection(self, path: str) -> list[str]:
        return self.state.toggle_selection(path)

    def set_selection(self, paths: Iterable[str]) -> list[str]:
        return self.state.set_selection(paths)

    def selection_labels(self) -> dict[str, str]:
        """Display name of every selected path, in selection order."""
        return {path: self.display_name(path) for path in self.state.selected}

    def stats(self, paths: Iterable[str] | None = None) -> StatsReport:
        """Aggregate counts for ``paths``, or for the current selection."""
        return aggregate_stats(self.projects, self.state.selected if paths is None else paths)


__all__ = ["SuiteTreeModel"]
