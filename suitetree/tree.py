"""Pure functions over normalized project/suite trees: search, lookup and display names."""

from __future__ import annotations

from typing import Iterator, Sequence, Union

from .models import ProjectNode, SuiteNode
from .paths import split_path

DISPLAY_SEPARATOR = " > "

Node = Union[ProjectNode, SuiteNode]


def filter_projects(projects: Sequence[ProjectNode] | None, query: str | None) -> Sequence[ProjectNode]:
    """Keep the nodes whose name contains ``query`` plus their ancestor chains.

    A project whose own name matches is returned whole. Inside other projects
    a suite survives if it or any descendant matches; when a descendant
    matched its children are trimmed to the surviving ones, otherwise it keeps
    all of its children. An empty query returns ``projects`` itself.
    """
    if not query:
        return projects if projects is not None else []
    if not projects:
        return []
    needle = query.lower()
    result: list[ProjectNode] = []
    for project in projects:
        if project.matches(needle):
            result.append(project)
            continue
        suites = _filter_suites(project.suites, needle)
        if suites:
            result.append(project.model_copy(update={"suites": suites}))
    return result


def _filter_suites(suites: Sequence[SuiteNode], needle: str) -> list[SuiteNode]:
    kept: list[SuiteNode] = []
    for suite in suites:
        children = _filter_suites(suite.children, needle)
        if children:
            kept.append(suite.model_copy(update={"children": children}))
        elif suite.matches(needle):
            kept.append(suite)
    return kept


def find_node(projects: Sequence[ProjectNode] | None, path: str) -> Node | None:
    """Return the node addressed by ``path`` or None when it is not in the tree."""
    parts = split_path(path)
    if not parts or not projects:
        return None
    node: Node | None = _find_by_id(projects, parts[0])
    for segment in parts[1:]:
        if node is None:
            return None
        node = _find_by_id(node.children, segment)
    return node


def _find_by_id(nodes: Sequence[Node], node_id: str) -> Node | None:
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def display_name(projects: Sequence[ProjectNode] | None, path: str) -> str:
    """Render ``path`` as ``Project > Suite > Child``.

    Each segment is looked up among the children of the previous one only.
    From the first segment that cannot be found onwards the raw ids are
    emitted, so stale paths still produce a readable label.
    """
    names: list[str] = []
    level: Sequence[Node] = projects or []
    resolved = True
    for segment in split_path(path):
        node = _find_by_id(level, segment) if resolved else None
        if node is None:
            resolved = False
            names.append(segment)
            continue
        names.append(node.name)
        level = node.children
    return DISPLAY_SEPARATOR.join(names)


def iter_nodes(projects: Sequence[ProjectNode] | None) -> Iterator[tuple[str, Node]]:
    """Yield ``(path, node)`` depth-first, each project before its suites."""
    for project in projects or []:
        yield project.path, project
        yield from _iter_suites(project.suites)


def _iter_suites(suites: Sequence[SuiteNode]) -> Iterator[tuple[str, Node]]:
    for suite in suites:
        yield suite.path, suite
        yield from _iter_suites(suite.children)


def count_nodes(projects: Sequence[ProjectNode] | None) -> int:
    return sum(1 for _ in iter_nodes(projects))


__all__ = [
    "DISPLAY_SEPARATOR",
    "count_nodes",
    "display_name",
    "filter_projects",
    "find_node",
    "iter_nodes",
]
