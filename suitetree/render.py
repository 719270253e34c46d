"""Text rendering of a suite tree with rich, used by the command line tool."""

from __future__ import annotations

from typing import Sequence

from rich.markup import escape
from rich.tree import Tree

from .models import ProjectNode, SuiteNode
from .state import TreeState


def build_rich_tree(projects: Sequence[ProjectNode], state: TreeState | None = None, show_collapsed: bool = False, title: str = "Test suites") -> Tree:
    """Build a rich Tree; collapsed branches are elided unless ``show_collapsed``."""
    state = state or TreeState()
    root = Tree(f"[bold]{escape(title)}[/bold]")
    for project in projects:
        branch = root.add(_label(project.name, project.path, state, project.suites))
        if show_collapsed or state.is_expanded(project.path):
            _add_suites(branch, project.suites, state, show_collapsed)
    return root


def _add_suites(branch: Tree, suites: Sequence[SuiteNode], state: TreeState, show_collapsed: bool) -> None:
    for suite in suites:
        label = _label(suite.name, suite.path, state, suite.children)
        if suite.test_case_count:
            label += f" [dim]({suite.test_case_count} tests)[/dim]"
        child = branch.add(label)
        if suite.children and (show_collapsed or state.is_expanded(suite.path)):
            _add_suites(child, suite.children, state, show_collapsed)


def _label(name: str, path: str, state: TreeState, children: Sequence[SuiteNode]) -> str:
    mark = "[green]\\[x][/green]" if state.is_selected(path) else "[ ]"
    text = f"[bold]{escape(name)}[/bold]" if state.is_selected(path) else escape(name)
    if children and not state.is_expanded(path):
        text += " [dim]+[/dim]"
    return f"{mark} {text}"


__all__ = ["build_rich_tree"]
