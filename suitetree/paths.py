"""Helpers for colon-delimited node paths (``projectId:suiteId:childId``)."""

from __future__ import annotations

from typing import Iterable

SEPARATOR = ":"


def child_path(parent_path: str, node_id: str) -> str:
    if not parent_path:
        return node_id
    return f"{parent_path}{SEPARATOR}{node_id}"


def split_path(path: str) -> list[str]:
    """Split a path into its id segments. The empty path has no segments."""
    if not path:
        return []
    return path.split(SEPARATOR)


def ancestor_paths(path: str) -> list[str]:
    """Return every strict prefix of ``path``, outermost (project id) first."""
    parts = split_path(path)
    return [SEPARATOR.join(parts[:i]) for i in range(1, len(parts))]


def dedupe(paths: Iterable[str]) -> list[str]:
    """Drop repeated paths, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for p in paths:
        if p not in seen:
            seen.add(p)
            result.append(p)
    return result


__all__ = [
    "SEPARATOR",
    "ancestor_paths",
    "child_path",
    "dedupe",
    "split_path",
]
