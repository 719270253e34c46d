import copy

import pytest

from suitetree import ingest

SCENARIO = [
    {
        "id": "P1",
        "name": "Proj",
        "suites": [
            {"Suite_Id": "S1", "Suite Name": "Login", "Suites": [{"Suite_Id": "S2", "Suite Name": "Valid"}]},
        ],
    }
]

# Shaped like the test management export: Mongo id next to the project id,
# a wrapper record at the top level, children split over Suites/Child_Suites.
BACKEND = [
    {
        "id": "65f0c1",
        "Project ID": "P1",
        "Project Name": "Payments",
        "Project Prefix": "PAY",
        "Test Suites": [
            {
                "Suites": [
                    {
                        "Suite_Id": "S1",
                        "Suite Name": "Checkout",
                        "Total_Test_Cases": 10,
                        "Passing_Test_Cases": 7,
                        "Failing_Test_Cases": 2,
                        "Skipped_Test_Cases": 1,
                        "Automated_Test_Cases": 5,
                        "Automatable_Test_Cases": 8,
                        "Suites": [{"Suite_Id": "S11", "Suite Name": "Card", "Total_Test_Cases": 4, "Passing_Test_Cases": 4}],
                        "Child_Suites": [{"Suite_Id": "S12", "Suite Name": "Wallet", "Total_Test_Cases": 3, "Failing_Test_Cases": 3}],
                    }
                ]
            },
            {
                "Suite_Id": "S2",
                "Suite Name": "Refunds",
                "totalTestCases": 6,
                "Child_Suites": [None, {"Suite_Id": "S21", "Suite Name": "Partial refund"}],
            },
        ],
    },
    {
        "Project ID": "P2",
        "Project Name": "Mobile Wallet",
        "Test Suites": [
            {"Suite_Id": "M1", "Suite Name": "Login"},
            {"Suite_Id": "M2", "Suite Name": "Onboarding", "Suites": [{"Suite_Id": "M21", "Suite Name": "Login again"}]},
        ],
    },
]


@pytest.fixture
def scenario_raw():
    return copy.deepcopy(SCENARIO)


@pytest.fixture
def backend_raw():
    return copy.deepcopy(BACKEND)


@pytest.fixture
def scenario_projects(scenario_raw):
    return ingest(scenario_raw)


@pytest.fixture
def backend_projects(backend_raw):
    return ingest(backend_raw)
