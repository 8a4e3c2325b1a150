"""Turn list-query parameters into an owner-scoped task predicate.

A ``TaskFilter`` is an immutable tuple of clauses. Each clause is a small
frozen dataclass naming one filter dimension; ``TaskFilter.to_sql`` compiles
the whole thing into a single AND-ed SQLAlchemy expression.

Due-date window precedence:

1. ``from`` and ``to``  -> inclusive range
2. ``gt`` and ``lt``    -> exclusive range
3. ``gt`` alone         -> strictly after
4. ``lt`` alone         -> strictly before
5. ``from`` alone       -> on or after
6. ``to`` alone         -> on or before
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple, Union

from sqlalchemy import and_

from . import ids
from .config import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE
from .exceptions import InvalidFilterValue
from .models import Priority, Task, TaskStatus, to_naive_utc
from .schemas.task import TaskQueryParams


@dataclass(frozen=True)
class OwnedBy:
    owner_id: bytes


@dataclass(frozen=True)
class Equals:
    field: str
    value: object


@dataclass(frozen=True)
class OneOf:
    field: str
    values: tuple


@dataclass(frozen=True)
class DueBetween:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class DueWithin:
    after: datetime
    before: datetime


@dataclass(frozen=True)
class DueAfter:
    after: datetime
    inclusive: bool = False


@dataclass(frozen=True)
class DueBefore:
    before: datetime
    inclusive: bool = False


Clause = Union[OwnedBy, Equals, OneOf, DueBetween, DueWithin, DueAfter, DueBefore]


def _compile(clause: Clause):
    if isinstance(clause, OwnedBy):
        return Task.owner_id == clause.owner_id
    if isinstance(clause, Equals):
        return getattr(Task, clause.field) == clause.value
    if isinstance(clause, OneOf):
        return getattr(Task, clause.field).in_(clause.values)
    if isinstance(clause, DueBetween):
        return and_(Task.due_date >= clause.start, Task.due_date <= clause.end)
    if isinstance(clause, DueWithin):
        return and_(Task.due_date > clause.after, Task.due_date < clause.before)
    if isinstance(clause, DueAfter):
        if clause.inclusive:
            return Task.due_date >= clause.after
        return Task.due_date > clause.after
    if isinstance(clause, DueBefore):
        if clause.inclusive:
            return Task.due_date <= clause.before
        return Task.due_date < clause.before
    raise TypeError(f"Unknown filter clause: {clause!r}")


@dataclass(frozen=True)
class TaskFilter:
    clauses: Tuple[Clause, ...]

    @classmethod
    def for_owner(cls, owner_id: bytes) -> "TaskFilter":
        return cls((OwnedBy(owner_id),))

    def with_clause(self, clause: Clause) -> "TaskFilter":
        return TaskFilter(self.clauses + (clause,))

    def to_sql(self):
        return and_(*(_compile(clause) for clause in self.clauses))


@dataclass(frozen=True)
class TaskQuery:
    """Predicate, ordering and page window for one list call."""
    filter: TaskFilter
    ascending: bool
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    def order_by(self):
        if self.ascending:
            return Task.created_at.asc()
        return Task.created_at.desc()


def parse_datetime(name: str, value: str) -> datetime:
    """Parse an ISO-8601 query value into a naive UTC datetime."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise InvalidFilterValue(f"Invalid date for '{name}': {value!r}")
    return to_naive_utc(parsed)


def parse_enum_list(name: str, value: str, enum_cls) -> tuple:
    """Parse a comma-separated list of enum names, e.g. ``IN_PROGRESS,COMPLETED``."""
    members = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            members.append(enum_cls(item))
        except ValueError:
            raise InvalidFilterValue(f"Invalid value for '{name}': {item!r}")
    return tuple(members)


def check_page(page) -> int:
    """Page index in [0, MAX_PAGE]; larger values are rejected."""
    page = max(page or 0, 0)
    if page > MAX_PAGE:
        raise InvalidFilterValue(f"Invalid value for 'page': must be at most {MAX_PAGE}")
    return page


def clamp_page_size(page_size) -> int:
    if not page_size or page_size < 1:
        return DEFAULT_PAGE_SIZE
    return min(page_size, MAX_PAGE_SIZE)


def _due_window(params: TaskQueryParams):
    start = parse_datetime("from", params.from_) if params.from_ else None
    end = parse_datetime("to", params.to) if params.to else None
    gt = parse_datetime("gt", params.gt) if params.gt else None
    lt = parse_datetime("lt", params.lt) if params.lt else None

    if start is not None and end is not None:
        return DueBetween(start, end)
    if gt is not None and lt is not None:
        return DueWithin(gt, lt)
    if gt is not None:
        return DueAfter(gt)
    if lt is not None:
        return DueBefore(lt)
    if start is not None:
        return DueAfter(start, inclusive=True)
    if end is not None:
        return DueBefore(end, inclusive=True)
    return None


def build_task_query(params: TaskQueryParams, owner_id: bytes) -> TaskQuery:
    """Build the owner-scoped query for ``params``.

    The owner clause always comes first, whatever else is requested.
    """
    task_filter = TaskFilter.for_owner(owner_id)

    for field in ("workspace_id", "project_id", "parent_id"):
        value = getattr(params, field)
        if value:
            task_filter = task_filter.with_clause(Equals(field, ids.encode(value)))

    if params.status:
        statuses = parse_enum_list("status", params.status, TaskStatus)
        if statuses:
            task_filter = task_filter.with_clause(OneOf("status", statuses))

    if params.priority:
        priorities = parse_enum_list("priority", params.priority, Priority)
        if priorities:
            task_filter = task_filter.with_clause(OneOf("priority", priorities))

    window = _due_window(params)
    if window is not None:
        task_filter = task_filter.with_clause(window)

    return TaskQuery(
        filter=task_filter,
        ascending=params.dir == "asc",
        page=check_page(params.page),
        page_size=clamp_page_size(params.page_size),
    )
