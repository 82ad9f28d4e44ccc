"""Filter and sort derivation behind the history table and its exports.

``derive`` is a pure function of the entries, the view parameters and one
``now``; the on-screen table and both export formats go through it so they
always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, FrozenSet, Iterable, List, Optional

from app.models.activity import Activity
from app.services.dates import calendar_date, parse_occurred_on, range_bounds, week_bounds

__all__ = [
    "DATE_RANGES",
    "SORT_DIRECTIONS",
    "SORT_FIELDS",
    "ViewParams",
    "derive",
    "matches_range",
    "matches_search",
    "week_bounds",
]

DATE_RANGES = ("today", "week", "all")
SORT_FIELDS = ("occurred_on", "task", "minutes")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class ViewParams:
    date_range: str = "today"
    selected_tasks: FrozenSet[str] = field(default_factory=frozenset)
    search_query: str = ""
    sort_field: str = "occurred_on"
    sort_direction: str = "desc"
    include_deleted: bool = False

    def __post_init__(self):
        if self.date_range not in DATE_RANGES:
            raise ValueError(f"Unknown date range: {self.date_range!r}")
        if self.sort_field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {self.sort_field!r}")
        if self.sort_direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.sort_direction!r}")
        tasks = frozenset(Activity.parse(t).value for t in (self.selected_tasks or ()))
        object.__setattr__(self, "selected_tasks", tasks)
        object.__setattr__(self, "search_query", self.search_query or "")

    def with_changes(self, **changes) -> "ViewParams":
        return replace(self, **changes)


def _task_value(entry: Any) -> str:
    task = entry.task
    return task.value if isinstance(task, Activity) else str(task)


def matches_range(occurred_on: Any, date_range: str, today: date) -> bool:
    bounds = range_bounds(date_range, today)
    if bounds is None:
        return True
    start, end = bounds
    return start <= calendar_date(occurred_on) < end


def matches_search(entry: Any, query: str) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    for text in (getattr(entry, "comment", None), getattr(entry, "other_task", None)):
        if text and needle in text.lower():
            return True
    return False


def _sort_key(sort_field: str):
    if sort_field == "occurred_on":
        return lambda entry: parse_occurred_on(entry.occurred_on)
    if sort_field == "task":
        return lambda entry: (entry.other_task or _task_value(entry)).lower()
    return lambda entry: int(entry.minutes)


def derive(entries: Iterable[Any], params: ViewParams, now: Optional[datetime] = None) -> List[Any]:
    today = (now or datetime.now()).date()

    visible = []
    for entry in entries:
        if getattr(entry, "deleted_at", None) is not None and not params.include_deleted:
            continue
        if not matches_range(entry.occurred_on, params.date_range, today):
            continue
        if params.selected_tasks and _task_value(entry) not in params.selected_tasks:
            continue
        if not matches_search(entry, params.search_query):
            continue
        visible.append(entry)

    # sorted() is stable in both directions, so ties keep their input order.
    return sorted(
        visible,
        key=_sort_key(params.sort_field),
        reverse=params.sort_direction == "desc",
    )
