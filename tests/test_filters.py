# tests/test_filters.py

from datetime import datetime

import pytest

from taskboard import ids
from taskboard.config import MAX_PAGE
from taskboard.exceptions import InvalidFilterValue, InvalidIdentifier
from taskboard.filters import (
    DueAfter,
    DueBefore,
    DueBetween,
    DueWithin,
    Equals,
    OneOf,
    OwnedBy,
    TaskFilter,
    build_task_query,
    parse_datetime,
)
from taskboard.models import Priority, TaskStatus
from taskboard.schemas.task import TaskQueryParams

OWNER = ids.generate()


def _query(**params):
    return build_task_query(TaskQueryParams(**params), OWNER)


def _window(query):
    windows = [
        c for c in query.filter.clauses
        if isinstance(c, (DueBetween, DueWithin, DueAfter, DueBefore))
    ]
    assert len(windows) <= 1
    return windows[0] if windows else None


def test_owner_clause_always_comes_first():
    query = _query(status="COMPLETED", projectId="7c9e6679-7425-40de-944b-e07fc1f90ae7")
    assert query.filter.clauses[0] == OwnedBy(OWNER)


def test_no_params_means_owner_only_defaults():
    query = _query()
    assert query.filter.clauses == (OwnedBy(OWNER),)
    assert query.page == 0
    assert query.page_size == 10
    assert query.ascending is False
    assert query.offset == 0


def test_page_size_is_capped_at_fifty():
    assert _query(page_size=1000).page_size == 50
    assert _query(page_size=50).page_size == 50
    assert _query(page_size=7).page_size == 7


def test_offset_is_page_times_page_size():
    assert _query(page=3, page_size=20).offset == 60


def test_page_beyond_the_last_allowed_index_is_rejected():
    assert _query(page=MAX_PAGE).page == MAX_PAGE
    with pytest.raises(InvalidFilterValue):
        _query(page=MAX_PAGE + 1)
    with pytest.raises(InvalidFilterValue):
        _query(page=10 ** 20)


@pytest.mark.parametrize("direction,ascending", [("asc", True), ("ASC", False), ("desc", False), (None, False)])
def test_only_literal_asc_sorts_ascending(direction, ascending):
    assert _query(dir=direction).ascending is ascending


def test_scope_ids_become_equality_clauses_on_binary_keys():
    workspace = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
    parent = "16fd2706-8baf-433b-82eb-8c7fada847da"
    query = _query(workspaceId=workspace, parentId=parent)
    assert Equals("workspace_id", ids.encode(workspace)) in query.filter.clauses
    assert Equals("parent_id", ids.encode(parent)) in query.filter.clauses


def test_malformed_scope_id_is_rejected():
    with pytest.raises(InvalidIdentifier):
        _query(projectId="nope")


def test_status_and_priority_lists():
    query = _query(status="IN_PROGRESS, COMPLETED", priority="HIGH")
    assert OneOf("status", (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)) in query.filter.clauses
    assert OneOf("priority", (Priority.HIGH,)) in query.filter.clauses


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidFilterValue):
        _query(status="IN_PROGRESS,DONE")


def test_from_and_to_make_an_inclusive_range():
    window = _window(_query(from_="2024-01-01", to="2024-01-31"))
    assert window == DueBetween(datetime(2024, 1, 1), datetime(2024, 1, 31))


def test_from_and_to_win_over_gt_and_lt():
    window = _window(
        _query(from_="2024-01-01", to="2024-01-31", gt="2023-06-01", lt="2023-07-01")
    )
    assert isinstance(window, DueBetween)


def test_gt_and_lt_make_an_exclusive_range():
    window = _window(_query(gt="2024-01-01", lt="2024-02-01"))
    assert window == DueWithin(datetime(2024, 1, 1), datetime(2024, 2, 1))


def test_gt_alone_is_strictly_after():
    assert _window(_query(gt="2024-01-01")) == DueAfter(datetime(2024, 1, 1))


def test_lt_alone_is_strictly_before():
    assert _window(_query(lt="2024-01-01")) == DueBefore(datetime(2024, 1, 1))


def test_gt_alone_beats_a_lone_from():
    assert _window(_query(from_="2024-01-01", gt="2024-02-01")) == DueAfter(datetime(2024, 2, 1))


def test_lone_from_and_to_are_inclusive_bounds():
    assert _window(_query(from_="2024-01-01")) == DueAfter(datetime(2024, 1, 1), inclusive=True)
    assert _window(_query(to="2024-01-01")) == DueBefore(datetime(2024, 1, 1), inclusive=True)


def test_malformed_date_is_rejected():
    with pytest.raises(InvalidFilterValue):
        _query(from_="yesterday", to="2024-01-31")


def test_aware_dates_are_normalized_to_utc():
    assert parse_datetime("gt", "2024-01-01T02:00:00+02:00") == datetime(2024, 1, 1, 0, 0)
    assert parse_datetime("gt", "2024-01-01T00:00:00Z") == datetime(2024, 1, 1, 0, 0)


def test_filter_values_are_immutable():
    base = TaskFilter.for_owner(OWNER)
    extended = base.with_clause(Equals("project_id", b"x" * 16))
    assert base.clauses == (OwnedBy(OWNER),)
    assert len(extended.clauses) == 2
    with pytest.raises(AttributeError):
        base.clauses = ()


def test_predicate_compiles_to_sql():
    sql = str(_query(status="COMPLETED", gt="2024-01-01").filter.to_sql())
    assert "tasks.owner_id" in sql
    assert "tasks.status IN" in sql
    assert "tasks.due_date >" in sql
