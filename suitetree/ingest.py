"""
suitetree.ingest
----------------
Turns the raw project/suite payload delivered by the test management backend
into normalized :class:`ProjectNode` trees.

The backend is inconsistent about where children live: a suite may carry its
children under ``Suites``, under ``Child_Suites`` or under both, and a project's
suite list may contain *wrappers* (records with neither suite id nor name
that only hold a non-empty nested suite list). Any other record without an
id is malformed. All of that is resolved here so the rest of the package
only ever sees ``SuiteNode.children``.

Malformed records are dropped together with their subtree. Pass a list as
``errors`` to collect a :class:`MalformedRecordError` for each of them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from pydantic import ValidationError

from .errors import MalformedRecordError
from .models import CaseStats, ProjectNode, SuiteNode
from .paths import SEPARATOR, child_path

logger = logging.getLogger(__name__)

PROJECT_ID_KEYS = ("Project ID", "Project_Id", "projectId", "id")
PROJECT_NAME_KEYS = ("Project Name", "Project_Name", "projectName", "name")
PROJECT_SUITES_KEYS = ("Test Suites", "Project_Test_Suites", "testSuites", "suites")

SUITE_ID_KEYS = ("Suite_Id", "suiteId", "id")
SUITE_NAME_KEYS = ("Suite Name", "Suite_Name", "suiteName", "name")
# every one of these that is present contributes children, in this order
SUITE_CHILD_KEYS = ("Suites", "Child_Suites", "suites", "children")
TEST_CASE_COUNT_KEYS = ("Total_Test_Cases", "totalTestCases", "testCaseCount")
CASE_STAT_KEYS = {
    "passing": ("Passing_Test_Cases", "passingTestCases"),
    "failing": ("Failing_Test_Cases", "failingTestCases"),
    "skipped": ("Skipped_Test_Cases", "skippedTestCases"),
    "automatable": ("Automatable_Test_Cases", "automatableTestCases"),
    "automated": ("Automated_Test_Cases", "automatedTestCases"),
}


def ingest(raw_projects: Iterable[Any] | None, errors: list[MalformedRecordError] | None = None) -> list[ProjectNode]:
    """Build normalized project trees from a raw backend snapshot.

    Args:
        raw_projects: ordered project records as delivered by the backend.
        errors: optional list; when given, one MalformedRecordError is
            appended per dropped record (strict collection). Otherwise
            dropped records are only logged at DEBUG level.

    Returns:
        The projects in input order, each with a fully normalized suite tree
        and a path assigned to every suite.
    """
    if raw_projects is None:
        return []
    if isinstance(raw_projects, (str, bytes, Mapping)) or not isinstance(raw_projects, Iterable):
        raise TypeError(f"Expected a sequence of project records, got {type(raw_projects).__name__}")

    collector = _Collector(errors)
    projects: list[ProjectNode] = []
    seen_ids: set[str] = set()
    for record in raw_projects:
        if record is None:
            continue
        project = _ingest_project(record, seen_ids, collector)
        if project is not None:
            projects.append(project)

    logger.info(
        f"Ingested {len(projects)} projects with {collector.suites} suites, "
        f"dropped {collector.dropped} malformed records"
    )
    return projects


class _Collector:
    """Tracks dropped records for one ingestion pass."""

    def __init__(self, errors: list[MalformedRecordError] | None):
        self.errors = errors
        self.dropped = 0
        self.suites = 0

    def reject(self, reason: str, record: Any, parent_path: str | None) -> None:
        self.dropped += 1
        error = MalformedRecordError(reason, record=record, parent_path=parent_path)
        logger.debug(error.message)
        if self.errors is not None:
            self.errors.append(error)


def _first(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _check_id(node_id: str | None, kind: str) -> str | None:
    """Return a rejection reason for an unusable id, or None if it is fine."""
    if node_id is None:
        return f"{kind} has no id"
    if SEPARATOR in node_id:
        return f"{kind} id {node_id!r} contains {SEPARATOR!r}"
    return None


def _ingest_project(record: Any, seen_ids: set[str], collector: _Collector) -> ProjectNode | None:
    if not isinstance(record, Mapping):
        collector.reject(f"project record is a {type(record).__name__}, not a mapping", record, None)
        return None

    project_id = _as_text(_first(record, PROJECT_ID_KEYS))
    reason = _check_id(project_id, "project")
    if reason is None and project_id in seen_ids:
        reason = f"duplicate project id {project_id!r}"
    name = _as_text(_first(record, PROJECT_NAME_KEYS))
    if reason is None and name is None:
        reason = f"project {project_id!r} has no name"
    if reason is not None:
        collector.reject(reason, record, None)
        return None
    assert project_id is not None and name is not None
    seen_ids.add(project_id)

    raw_suites = _first(record, PROJECT_SUITES_KEYS)
    suites = _ingest_level(_as_entries(raw_suites, project_id, record, collector), project_id, collector)
    return ProjectNode(id=project_id, name=name, suites=suites)


def _as_entries(value: Any, parent_path: str, record: Any, collector: _Collector) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    collector.reject(f"child list is a {type(value).__name__}, not a list", record, parent_path)
    return []


def _is_wrapper(record: Mapping[str, Any]) -> bool:
    """True for an id-less record with no name and at least one non-empty child list."""
    if _as_text(_first(record, SUITE_NAME_KEYS)) is not None:
        return False
    for key in SUITE_CHILD_KEYS:
        value = record.get(key)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) > 0:
            return True
    return False


def _child_entries(record: Mapping[str, Any], parent_path: str, collector: _Collector) -> list[Any]:
    """Concatenate every child list field of ``record``, in key order."""
    entries: list[Any] = []
    for key in SUITE_CHILD_KEYS:
        if record.get(key) is None:
            continue
        entries.extend(_as_entries(record[key], parent_path, record, collector))
    return entries


def _ingest_level(entries: list[Any], parent_path: str, collector: _Collector, seen_ids: set[str] | None = None) -> list[SuiteNode]:
    """Normalize one sibling level. Wrappers are spliced in place."""
    if seen_ids is None:
        seen_ids = set()
    nodes: list[SuiteNode] = []
    for entry in entries:
        if entry is None:
            continue
        if not isinstance(entry, Mapping):
            collector.reject(f"suite record is a {type(entry).__name__}, not a mapping", entry, parent_path)
            continue

        suite_id = _as_text(_first(entry, SUITE_ID_KEYS))
        if suite_id is None and _is_wrapper(entry):
            # its suites belong to this level
            children = _child_entries(entry, parent_path, collector)
            nodes.extend(_ingest_level(children, parent_path, collector, seen_ids))
            continue

        node = _ingest_suite(entry, suite_id, parent_path, seen_ids, collector)
        if node is not None:
            nodes.append(node)
    return nodes


def _ingest_suite(record: Mapping[str, Any], suite_id: str | None, parent_path: str, seen_ids: set[str], collector: _Collector) -> SuiteNode | None:
    reason = _check_id(suite_id, "suite")
    if reason is None and suite_id in seen_ids:
        reason = f"duplicate suite id {suite_id!r}"
    name = _as_text(_first(record, SUITE_NAME_KEYS))
    if reason is None and name is None:
        reason = f"suite {suite_id!r} has no name"
    if reason is not None:
        collector.reject(reason, record, parent_path)
        return None
    assert suite_id is not None

    path = child_path(parent_path, suite_id)
    try:
        node = SuiteNode(
            id=suite_id,
            name=name,
            path=path,
            test_case_count=_first(record, TEST_CASE_COUNT_KEYS) or 0,
            stats=CaseStats(**{field: _first(record, keys) or 0 for field, keys in CASE_STAT_KEYS.items()}),
        )
    except ValidationError as exc:
        collector.reject(f"suite {suite_id!r} has invalid counts ({exc.error_count()} errors)", record, parent_path)
        return None
    seen_ids.add(suite_id)
    collector.suites += 1

    children = _child_entries(record, path, collector)
    node.children = _ingest_level(children, path, collector)
    return node


__all__ = [
    "CASE_STAT_KEYS",
    "PROJECT_ID_KEYS",
    "PROJECT_NAME_KEYS",
    "PROJECT_SUITES_KEYS",
    "SUITE_CHILD_KEYS",
    "SUITE_ID_KEYS",
    "SUITE_NAME_KEYS",
    "TEST_CASE_COUNT_KEYS",
    "ingest",
]
