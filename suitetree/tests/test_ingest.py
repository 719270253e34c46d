import pytest

from suitetree import MalformedRecordError, ingest, iter_nodes, load_snapshot
from suitetree.tree import display_name


def ids(nodes):
    return [node.id for node in nodes]


def test_scenario_paths(scenario_projects):
    (project,) = scenario_projects
    assert project.id == "P1"
    assert project.path == "P1"
    login = project.suites[0]
    assert login.path == "P1:S1"
    assert login.children[0].path == "P1:S1:S2"
    assert login.children[0].name == "Valid"


def test_wrapper_is_spliced_into_its_level(backend_projects):
    payments = backend_projects[0]
    assert ids(payments.suites) == ["S1", "S2"]
    assert payments.suites[0].path == "P1:S1"


def test_both_child_fields_are_merged_in_order(backend_projects):
    checkout = backend_projects[0].suites[0]
    assert ids(checkout.children) == ["S11", "S12"]
    assert checkout.children[1].path == "P1:S1:S12"


def test_project_id_prefers_backend_project_id_over_mongo_id(backend_projects):
    assert ids(backend_projects) == ["P1", "P2"]
    assert backend_projects[0].name == "Payments"


def test_null_children_are_skipped_without_errors(backend_raw):
    errors = []
    projects = ingest(backend_raw, errors=errors)
    assert ids(projects[0].suites[1].children) == ["S21"]
    assert errors == []


def test_counts_and_stats(backend_projects):
    checkout = backend_projects[0].suites[0]
    assert checkout.test_case_count == 10
    assert checkout.stats.passing == 7
    assert checkout.stats.automatable == 8
    refunds = backend_projects[0].suites[1]
    assert refunds.test_case_count == 6
    assert refunds.children[0].test_case_count == 0


def test_nested_wrapper():
    raw = [{"Project ID": "P", "Project Name": "P", "Test Suites": [
        {"Suite_Id": "X", "Suite Name": "X", "Suites": [{"Child_Suites": [{"Suite_Id": "Y", "Suite Name": "Y"}]}]},
    ]}]
    (project,) = ingest(raw)
    assert project.suites[0].children[0].path == "P:X:Y"


def test_named_suite_without_id_is_not_a_wrapper():
    raw = [{"Project ID": "P1", "Project Name": "Proj", "Test Suites": [
        {"Suite_Id": "S1", "Suite Name": "Login", "Suites": [
            {"Suite Name": "Broken", "Suites": [{"Suite_Id": "S5", "Suite Name": "Orphan"}]},
            {"Suite_Id": "S2", "Suite Name": "Valid"},
        ]},
    ]}]
    errors = []
    (project,) = ingest(raw, errors=errors)
    login = project.suites[0]
    assert ids(login.children) == ["S2"]
    assert [path for path, _ in iter_nodes([project])] == ["P1", "P1:S1", "P1:S1:S2"]
    assert len(errors) == 1
    assert errors[0].reason == "suite has no id"
    assert errors[0].parent_path == "P1:S1"


def test_suite_without_id_and_empty_children_is_reported():
    raw = [{"Project ID": "P1", "Project Name": "Proj", "Test Suites": [
        {"Suite_Id": "S1", "Suite Name": "Login", "Suites": [{"Suite Name": "No id here", "Suites": []}]},
        {"Child_Suites": []},
    ]}]
    errors = []
    (project,) = ingest(raw, errors=errors)
    assert ids(project.suites) == ["S1"]
    assert project.suites[0].children == []
    assert [e.reason for e in errors] == ["suite has no id", "suite has no id"]
    assert [e.parent_path for e in errors] == ["P1:S1", "P1"]


def test_numeric_ids_become_strings():
    raw = [{"Project ID": 7, "Project Name": "Seven", "Test Suites": [{"Suite_Id": 42, "Suite Name": "Answer"}]}]
    (project,) = ingest(raw)
    assert project.id == "7"
    assert project.suites[0].path == "7:42"


BAD = [
    {"Project ID": "P1", "Project Name": "Alpha", "Test Suites": [
        {"Suite Name": "no id"},
        {"Suite_Id": "A1"},
        {"Suite_Id": "A:2", "Suite Name": "colon"},
        {"Suite_Id": "A3", "Suite Name": "ok"},
        {"Suite_Id": "A3", "Suite Name": "duplicate"},
        {"Suite_Id": "A4", "Suite Name": "negative", "Total_Test_Cases": -1},
        "garbage",
        None,
    ]},
    {"Project Name": "no id"},
    {"Project ID": "P1", "Project Name": "duplicate project"},
    {"Project ID": "P3"},
    42,
]


def test_malformed_records_are_dropped_silently_by_default():
    projects = ingest(BAD)
    assert ids(projects) == ["P1"]
    assert ids(projects[0].suites) == ["A3"]
    assert projects[0].suites[0].name == "ok"


def test_strict_mode_collects_errors():
    errors = []
    projects = ingest(BAD, errors=errors)
    assert ids(projects[0].suites) == ["A3"]
    assert len(errors) == 10
    assert all(isinstance(e, MalformedRecordError) for e in errors)
    reasons = " | ".join(e.reason for e in errors)
    assert "suite has no id" in reasons
    assert "suite 'A1' has no name" in reasons
    assert "contains ':'" in reasons
    assert "duplicate suite id 'A3'" in reasons
    assert "invalid counts" in reasons
    assert "duplicate project id 'P1'" in reasons
    assert errors[0].parent_path == "P1"


def test_non_sequence_payload_is_rejected():
    with pytest.raises(TypeError):
        ingest({"Project ID": "P1"})
    assert ingest(None) == []


def test_paths_are_unique(backend_projects):
    paths = [path for path, _ in iter_nodes(backend_projects)]
    assert len(paths) == len(set(paths)) == 10


def test_display_name_starts_with_project_name(backend_projects):
    for project in backend_projects:
        for path, _ in iter_nodes([project]):
            assert display_name(backend_projects, path).split(" > ")[0] == project.name


def test_load_snapshot_formats(tmp_path, scenario_raw):
    yaml_file = tmp_path / "snapshot.yaml"
    yaml_file.write_text(
        "projects:\n"
        "  - id: P1\n"
        "    name: Proj\n"
        "    suites:\n"
        "      - Suite_Id: S1\n"
        "        Suite Name: Login\n"
    )
    raw = load_snapshot(yaml_file)
    assert raw[0]["suites"][0]["Suite_Id"] == "S1"
    assert load_snapshot('[{"id": "P1", "name": "Proj"}]') == [{"id": "P1", "name": "Proj"}]
    assert load_snapshot(scenario_raw) == scenario_raw
    assert load_snapshot(b"") == []
    with pytest.raises(ValueError):
        load_snapshot({"not_projects": []})
    with pytest.raises(TypeError):
        load_snapshot(3)
