"""
suitetree.state
---------------
Expand/collapse and selection state for a suite tree.

Both maps are keyed by path string, so they survive a full rebuild of the
tree as long as the ids in the paths stay the same. The state object belongs
to the caller (the wizard, a test, the HTTP service); nothing in this module
keeps global state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from .models import ProjectNode
from .paths import ancestor_paths, dedupe

logger = logging.getLogger(__name__)


def toggle_selection(selection: Sequence[str], path: str) -> list[str]:
    """Add ``path`` if absent, remove it if present. Nothing else changes."""
    if path in selection:
        return [p for p in selection if p != path]
    return [*selection, path]


def reconcile_expansion(selection: Iterable[str], expansion: Mapping[str, bool]) -> dict[str, bool]:
    """Return ``expansion`` with every ancestor of every selected path expanded.

    Entries are only ever switched on, never off.
    """
    result = dict(expansion)
    for path in selection:
        for ancestor in ancestor_paths(path):
            result[ancestor] = True
    return result


def initial_expansion(projects: Iterable[ProjectNode]) -> dict[str, bool]:
    """All projects expanded, everything below collapsed."""
    return {project.path: True for project in projects}


@dataclass
class TreeState:
    """Caller-owned expansion and selection state."""

    expanded: dict[str, bool] = field(default_factory=dict)
    selected: list[str] = field(default_factory=list)

    def is_expanded(self, path: str) -> bool:
        return self.expanded.get(path, False)

    def toggle_expand(self, path: str) -> bool:
        """Flip the expanded flag of ``path`` and return the new value."""
        self.expanded[path] = not self.is_expanded(path)
        return self.expanded[path]

    def is_selected(self, path: str) -> bool:
        return path in self.selected

    def get_selection(self) -> list[str]:
        return list(self.selected)

    def toggle_selection(self, path: str) -> list[str]:
        self.selected = toggle_selection(self.selected, path)
        logger.debug(f"Selection toggled for {path!r}: selected={self.is_selected(path)}")
        self.reconcile()
        return self.get_selection()

    def set_selection(self, paths: Iterable[str]) -> list[str]:
        """Replace the selection wholesale, e.g. when restoring a saved team config."""
        self.selected = dedupe(paths)
        self.reconcile()
        return self.get_selection()

    def reconcile(self) -> None:
        self.expanded = reconcile_expansion(self.selected, self.expanded)

    def reset_expansion(self, projects: Iterable[ProjectNode]) -> None:
        """Back to the initial layout, then re-open the chains of selected paths."""
        self.expanded = initial_expansion(projects)
        self.reconcile()


__all__ = [
    "TreeState",
    "initial_expansion",
    "reconcile_expansion",
    "toggle_selection",
]
