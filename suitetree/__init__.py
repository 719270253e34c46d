"""Suite path tree model: normalized test suite trees, search, selection and expansion."""

from .errors import MalformedRecordError
from .ingest import ingest
from .model import SuiteTreeModel
from .models import CaseStats, ProjectNode, SuiteNode, load_snapshot
from .state import TreeState, reconcile_expansion, toggle_selection
from .stats import StatsReport, aggregate_stats
from .tree import display_name, filter_projects, find_node, iter_nodes

__all__ = [
    "CaseStats",
    "MalformedRecordError",
    "ProjectNode",
    "StatsReport",
    "SuiteNode",
    "SuiteTreeModel",
    "TreeState",
    "aggregate_stats",
    "display_name",
    "filter_projects",
    "find_node",
    "ingest",
    "iter_nodes",
    "load_snapshot",
    "reconcile_expansion",
    "toggle_selection",
]
