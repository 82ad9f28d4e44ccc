from datetime import datetime
from types import SimpleNamespace

import pytest

from app.models.activity import Activity
from app.services.dates import range_bounds
from app.services.list_engine import ViewParams, derive, matches_search, week_bounds

NOW = datetime(2026, 10, 21, 15, 30)  # a Wednesday


def _entry(entry_id, occurred_on, task=Activity.EMAILS, minutes=15, comment=None, other_task=None, deleted_at=None):
    return SimpleNamespace(
        id=entry_id,
        task=task.value,
        other_task=other_task,
        minutes=minutes,
        patient_count=None,
        is_typical_day=True,
        occurred_on=occurred_on,
        comment=comment,
        created_at=datetime(2026, 10, 1),
        updated_at=datetime(2026, 10, 1),
        deleted_at=deleted_at,
    )


def _ids(rows):
    return [row.id for row in rows]


def test_today_matches_both_date_and_datetime_forms():
    entries = [
        _entry("date-only", "2026-10-21"),
        _entry("morning", "2026-10-21T08:15:00"),
        _entry("late-with-offset", "2026-10-21T23:45:00-05:00"),
        _entry("yesterday", "2026-10-20T23:59:59"),
        _entry("tomorrow", "2026-10-22"),
    ]

    rows = derive(entries, ViewParams(date_range="today"), NOW)

    assert set(_ids(rows)) == {"date-only", "morning", "late-with-offset"}


def test_week_runs_monday_through_sunday():
    monday, sunday = week_bounds(NOW.date())
    assert monday.isoformat() == "2026-10-19"
    assert sunday.isoformat() == "2026-10-25"

    entries = [
        _entry("sun-before", "2026-10-18"),
        _entry("mon", "2026-10-19T00:00:00"),
        _entry("sun", "2026-10-25T22:00:00"),
        _entry("mon-after", "2026-10-26"),
    ]
    rows = derive(entries, ViewParams(date_range="week"), NOW)
    assert set(_ids(rows)) == {"mon", "sun"}


def test_all_range_has_no_bounds_and_unknown_range_is_rejected():
    assert range_bounds("all", NOW.date()) is None
    with pytest.raises(ValueError):
        range_bounds("month", NOW.date())
    with pytest.raises(ValueError):
        ViewParams(date_range="month")


def test_deleted_entries_are_hidden_unless_requested():
    entries = [
        _entry("live", "2026-10-21"),
        _entry("gone", "2026-10-21", deleted_at=datetime(2026, 10, 21, 9)),
    ]
    assert _ids(derive(entries, ViewParams(date_range="all"), NOW)) == ["live"]
    shown = derive(entries, ViewParams(date_range="all", include_deleted=True), NOW)
    assert set(_ids(shown)) == {"live", "gone"}


def test_task_filter_accepts_codes_and_labels():
    entries = [
        _entry("paf", "2026-10-21", task=Activity.PAF),
        _entry("emails", "2026-10-21", task=Activity.EMAILS),
        _entry("amu", "2026-10-21", task=Activity.AMU),
    ]
    params = ViewParams(date_range="all", selected_tasks=frozenset({"PAF", Activity.AMU.value}))

    assert set(_ids(derive(entries, params, NOW))) == {"paf", "amu"}
    assert params.selected_tasks == frozenset({Activity.PAF.value, Activity.AMU.value})


def test_empty_task_selection_means_every_task():
    entries = [_entry(str(i), "2026-10-21", task=activity) for i, activity in enumerate(Activity)]
    rows = derive(entries, ViewParams(date_range="all"), NOW)
    assert len(rows) == len(Activity)


def test_search_is_case_insensitive_over_comment_and_other_task():
    entries = [
        _entry("comment", "2026-10-21", comment="Reviewed VANCOMYCIN orders"),
        _entry("other", "2026-10-21", task=Activity.OTHER, other_task="Vancomycin dosing audit"),
        _entry("miss", "2026-10-21", comment="Committee prep"),
    ]
    rows = derive(entries, ViewParams(date_range="all", search_query="vancomycin"), NOW)

    assert set(_ids(rows)) == {"comment", "other"}
    assert matches_search(entries[2], "   ") is True


def test_derived_rows_are_a_subset_satisfying_every_filter():
    entries = [
        _entry("a", "2026-10-21", task=Activity.PAF, comment="sepsis"),
        _entry("b", "2026-10-21", task=Activity.EMAILS, comment="sepsis"),
        _entry("c", "2026-10-20", task=Activity.PAF, comment="sepsis"),
        _entry("d", "2026-10-21", task=Activity.PAF, comment="other"),
    ]
    params = ViewParams(date_range="today", selected_tasks=frozenset({"PAF"}), search_query="SEPSIS")

    assert _ids(derive(entries, params, NOW)) == ["a"]


def test_rederiving_the_visible_rows_changes_nothing():
    entries = [
        _entry("a", "2026-10-21T09:00:00", task=Activity.PAF, minutes=30, comment="sepsis"),
        _entry("b", "2026-10-21", task=Activity.EMAILS, minutes=30, comment="Sepsis bundle"),
        _entry("c", "2026-10-20", task=Activity.OTHER, other_task="Sepsis audit", minutes=10),
        _entry("d", "2026-10-19T18:00:00", task=Activity.AMU, minutes=45, comment="sepsis"),
        _entry("e", "2026-10-21", task=Activity.AMU, minutes=5, comment="monthly"),
        _entry("f", "2026-10-21", task=Activity.PAF, minutes=30, comment="sepsis", deleted_at=datetime(2026, 10, 21, 9)),
        _entry("g", "2026-10-12", task=Activity.PAF, minutes=60, comment="sepsis"),
    ]
    cases = [
        ViewParams(date_range="week", search_query="SEPSIS", sort_field="minutes", sort_direction="desc"),
        ViewParams(date_range="today", selected_tasks=frozenset({"PAF", "EMAILS"}), sort_field="task", sort_direction="asc"),
        ViewParams(date_range="all", sort_field="occurred_on", sort_direction="asc"),
    ]

    for params in cases:
        visible = derive(entries, params, NOW)
        identity = ViewParams(date_range="all", sort_field=params.sort_field, sort_direction=params.sort_direction)
        assert _ids(derive(visible, identity, NOW)) == _ids(visible)


def test_sort_by_minutes_both_directions():
    entries = [
        _entry("small", "2026-10-21", minutes=5),
        _entry("large", "2026-10-21", minutes=120),
        _entry("medium", "2026-10-21", minutes=45),
    ]
    asc = derive(entries, ViewParams(date_range="all", sort_field="minutes", sort_direction="asc"), NOW)
    desc = derive(entries, ViewParams(date_range="all", sort_field="minutes", sort_direction="desc"), NOW)

    assert _ids(asc) == ["small", "medium", "large"]
    assert _ids(desc) == ["large", "medium", "small"]


def test_sort_is_stable_for_ties():
    entries = [
        _entry("first", "2026-10-21", minutes=30),
        _entry("second", "2026-10-21", minutes=30),
        _entry("third", "2026-10-21", minutes=30),
    ]
    for direction in ("asc", "desc"):
        params = ViewParams(date_range="all", sort_field="minutes", sort_direction=direction)
        assert _ids(derive(entries, params, NOW)) == ["first", "second", "third"]


def test_sort_by_occurred_on_mixes_dates_and_datetimes():
    entries = [
        _entry("noon", "2026-10-21T12:00:00"),
        _entry("midnight-date", "2026-10-21"),
        _entry("yesterday", "2026-10-20T18:00:00"),
    ]
    rows = derive(entries, ViewParams(date_range="all"), NOW)
    assert _ids(rows) == ["noon", "midnight-date", "yesterday"]


def test_sort_by_task_prefers_other_task_name():
    entries = [
        _entry("tracking", "2026-10-21", task=Activity.AMU),
        _entry("other", "2026-10-21", task=Activity.OTHER, other_task="Antibiogram update"),
        _entry("admin", "2026-10-21", task=Activity.EMAILS),
    ]
    rows = derive(entries, ViewParams(date_range="all", sort_field="task", sort_direction="asc"), NOW)
    assert _ids(rows) == ["admin", "other", "tracking"]


def test_derive_does_not_mutate_its_input():
    entries = [_entry("b", "2026-10-21", minutes=1), _entry("a", "2026-10-21", minutes=2)]
    snapshot = list(entries)

    derive(entries, ViewParams(date_range="all", sort_field="minutes", sort_direction="desc"), NOW)

    assert entries == snapshot
