from __future__ import annotations

from conftest import ACTIVITY_ROWS, PEOPLE_ROWS, SPACE_ROWS, FakeResponse, make_session
from portal.datasets import PEOPLE_ERROR_MESSAGE, dataset_summary, load_portal_data, people_error


def test_all_datasets_load(config):
    session = make_session(
        people=FakeResponse({"values": PEOPLE_ROWS}),
        spaces=FakeResponse({"values": SPACE_ROWS}),
        activities=FakeResponse({"values": ACTIVITY_ROWS}),
    )
    results = load_portal_data(config, session=session)
    assert [r.status for r in results.values()] == ["ok", "ok", "ok"]
    assert results["people"].count == 3
    assert people_error(results) is None


def test_missing_activities_tab_does_not_block_people(config):
    session = make_session(
        people=FakeResponse({"values": PEOPLE_ROWS}),
        spaces=FakeResponse({"values": SPACE_ROWS}),
    )
    results = load_portal_data(config, session=session)
    assert results["people"].status == "ok"
    assert results["spaces"].count == 4
    assert results["activities"].status == "empty"
    assert results["activities"].records.empty
    assert people_error(results) is None


def test_people_failure_is_surfaced_and_keeps_previous_data(config):
    first = load_portal_data(config, session=make_session(people=FakeResponse({"values": PEOPLE_ROWS})))
    broken = make_session(people=FakeResponse({}, status_code=500))
    results = load_portal_data(config, session=broken, previous=first)
    assert results["people"].status == "failed"
    assert people_error(results) == PEOPLE_ERROR_MESSAGE
    assert results["people"].count == 3


def test_people_failure_without_previous_is_empty(config):
    results = load_portal_data(config, session=make_session())
    assert results["people"].status == "failed"
    assert results["people"].records.empty


def test_zero_rows_is_empty_not_error(config):
    session = make_session(people=FakeResponse({"values": [["NOME DO ALUNO"]]}))
    results = load_portal_data(config, session=session)
    assert results["people"].status == "empty"
    assert people_error(results) is None


def test_dataset_summary_hides_secondary_errors(config):
    results = load_portal_data(config, session=make_session(people=FakeResponse({"values": PEOPLE_ROWS})))
    summary = dataset_summary(results)
    assert summary["spaces"] == {"status": "empty", "count": 0, "columns": []}
    assert summary["people"]["columns"] == PEOPLE_ROWS[0]
