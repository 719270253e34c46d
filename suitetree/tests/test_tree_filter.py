from suitetree import display_name, filter_projects, find_node
from suitetree.tree import count_nodes, iter_nodes


def ids(nodes):
    return [node.id for node in nodes]


def paths_of(projects):
    return {path for path, _ in iter_nodes(projects)}


def test_filter_keeps_ancestors_of_a_match(scenario_projects):
    result = filter_projects(scenario_projects, "valid")
    assert paths_of(result) == {"P1", "P1:S1", "P1:S1:S2"}


def test_empty_query_returns_same_tree(backend_projects):
    assert filter_projects(backend_projects, "") is backend_projects
    assert filter_projects(backend_projects, None) is backend_projects
    assert len(filter_projects(backend_projects, "")) == len(backend_projects)


def test_empty_or_missing_tree():
    assert filter_projects([], "x") == []
    assert filter_projects(None, "x") == []


def test_filter_is_case_insensitive(backend_projects):
    result = filter_projects(backend_projects, "CARD")
    assert paths_of(result) == {"P1", "P1:S1", "P1:S1:S11"}


def test_project_name_match_keeps_whole_project(backend_projects):
    result = filter_projects(backend_projects, "wallet")
    assert ids(result) == ["P1", "P2"]
    # "Mobile Wallet" matched by name: untouched
    assert result[1] is backend_projects[1]
    # inside Payments only the chain to "Wallet" survives
    assert paths_of(result[:1]) == {"P1", "P1:S1", "P1:S1:S12"}


def test_direct_match_keeps_all_children(backend_projects):
    result = filter_projects(backend_projects, "checkout")
    checkout = result[0].suites[0]
    assert ids(result[0].suites) == ["S1"]
    assert ids(checkout.children) == ["S11", "S12"]


def test_descendant_match_trims_children(backend_projects):
    result = filter_projects(backend_projects, "login")
    assert ids(result) == ["P2"]
    assert ids(result[0].suites) == ["M1", "M2"]
    assert ids(result[0].suites[1].children) == ["M21"]


def test_every_matching_node_is_present(backend_projects):
    for query in ("refund", "card", "login", "on", "a"):
        result = paths_of(filter_projects(backend_projects, query))
        for path, node in iter_nodes(backend_projects):
            if query in node.name.lower():
                assert path in result, (query, path)


def test_filter_does_not_mutate_input(backend_projects):
    before = count_nodes(backend_projects)
    filter_projects(backend_projects, "card")
    assert count_nodes(backend_projects) == before
    assert ids(backend_projects[0].suites[0].children) == ["S11", "S12"]


def test_no_match(backend_projects):
    assert filter_projects(backend_projects, "nothing like this") == []


def test_display_name_scenario(scenario_projects):
    assert display_name(scenario_projects, "P1:S1:S2") == "Proj > Login > Valid"
    assert display_name(scenario_projects, "P1") == "Proj"


def test_display_name_stale_segment(scenario_projects):
    assert display_name(scenario_projects, "P1:S1:S9") == "Proj > Login > S9"


def test_display_name_stops_matching_after_a_miss(backend_projects):
    # S11 exists under S1, but once S9 is missing the rest is emitted raw
    assert display_name(backend_projects, "P1:S9:S11") == "Payments > S9 > S11"


def test_display_name_matches_level_by_level(backend_projects):
    # S11 is a grandchild of P1, not a child
    assert display_name(backend_projects, "P1:S11") == "Payments > S11"


def test_display_name_unknown_project(backend_projects):
    assert display_name(backend_projects, "P9:S1") == "P9 > S1"
    assert display_name(backend_projects, "") == ""
    assert display_name(None, "P1:S1") == "P1 > S1"


def test_find_node(backend_projects):
    assert find_node(backend_projects, "P1:S1:S12").name == "Wallet"
    assert find_node(backend_projects, "P2").name == "Mobile Wallet"
    assert find_node(backend_projects, "P1:S12") is None
    assert find_node(backend_projects, "") is None


def test_empty_query_on_empty_tree_returns_the_input():
    projects = []
    assert filter_projects(projects, "") is projects
    assert filter_projects(projects, None) is projects
    assert filter_projects(None, "") == []
