from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.errors import EntryNotFoundError
from app.models.activity import Activity
from app.models.time_entry import TimeEntry
from app.services.dates import normalize_occurred_on, range_bounds, utcnow
from app.services.entry_rules import validate_entry

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "task",
    "other_task",
    "minutes",
    "patient_count",
    "is_typical_day",
    "occurred_on",
    "comment",
)

TEMPLATE_FIELDS = ("task", "other_task", "minutes", "patient_count", "is_typical_day", "comment")


def _as_dict(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    # pydantic models: only what the caller actually set.
    return data.model_dump(exclude_unset=True)


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    task = Activity.parse(fields["task"])
    other_task = fields.get("other_task")
    comment = fields.get("comment")
    return {
        "task": task.value,
        "other_task": other_task.strip() if task is Activity.OTHER and other_task else None,
        "minutes": fields["minutes"],
        "patient_count": fields.get("patient_count") if task.is_patient_care else None,
        "is_typical_day": bool(fields.get("is_typical_day", True)),
        "occurred_on": normalize_occurred_on(fields["occurred_on"]),
        "comment": comment if comment and comment.strip() else None,
    }


class TimeEntryStore:
    """Time entries of one user.

    The caller owns the session and the transaction: nothing here commits.
    """

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = str(user_id)

    def _live_query(self):
        return self.db.query(TimeEntry).filter(
            TimeEntry.user_id == self.user_id,
            TimeEntry.deleted_at.is_(None),
        )

    def get(self, entry_id: str) -> Optional[TimeEntry]:
        return self._live_query().filter(TimeEntry.id == str(entry_id)).first()

    def create(self, data: Any, *, now: Optional[datetime] = None) -> TimeEntry:
        fields = _as_dict(data)
        fields.setdefault("occurred_on", (now or datetime.now()).isoformat(timespec="seconds"))
        validate_entry(
            task=fields.get("task"),
            minutes=fields.get("minutes"),
            other_task=fields.get("other_task"),
            patient_count=fields.get("patient_count"),
        )

        stamp = utcnow()
        entry = TimeEntry(
            id=str(uuid4()),
            user_id=self.user_id,
            created_at=stamp,
            updated_at=stamp,
            deleted_at=None,
            **_clean_fields(fields),
        )
        self.db.add(entry)
        self.db.flush()

        logger.info(
            "Time entry created",
            extra={"entry_id": entry.id, "user_id": self.user_id, "task": entry.task, "minutes": entry.minutes},
        )
        return entry

    def update(self, entry_id: str, patch: Any) -> TimeEntry:
        entry = self.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(str(entry_id))

        changes = {k: v for k, v in _as_dict(patch).items() if k in EDITABLE_FIELDS}
        merged = {name: getattr(entry, name) for name in EDITABLE_FIELDS}
        merged.update(changes)
        validate_entry(
            task=merged["task"],
            minutes=merged["minutes"],
            other_task=merged["other_task"],
            patient_count=merged["patient_count"],
        )

        for name, value in _clean_fields(merged).items():
            setattr(entry, name, value)
        entry.updated_at = utcnow()
        self.db.flush()

        logger.info(
            "Time entry updated",
            extra={"entry_id": entry.id, "user_id": self.user_id, "fields": sorted(changes)},
        )
        return entry

    def soft_delete(self, entry_ids: Iterable[str]) -> int:
        """All-or-nothing: any id that is not a live entry of this user aborts the batch."""
        ids = list(dict.fromkeys(str(i) for i in entry_ids))
        if not ids:
            return 0

        rows = self._live_query().filter(TimeEntry.id.in_(ids)).all()
        found = {row.id for row in rows}
        missing = [i for i in ids if i not in found]
        if missing:
            raise EntryNotFoundError(missing)

        stamp = utcnow()
        for row in rows:
            row.deleted_at = stamp
            row.updated_at = stamp
        self.db.flush()

        logger.info("Time entries deleted", extra={"user_id": self.user_id, "count": len(rows)})
        return len(rows)

    def list(
        self,
        date_range: str = "all",
        task: Optional[Any] = None,
        include_deleted: bool = False,
        *,
        now: Optional[datetime] = None,
    ) -> List[TimeEntry]:
        q = self.db.query(TimeEntry).filter(TimeEntry.user_id == self.user_id)

        if not include_deleted:
            q = q.filter(TimeEntry.deleted_at.is_(None))
        if task is not None:
            q = q.filter(TimeEntry.task == Activity.parse(task).value)

        today = (now or datetime.now()).date()
        bounds = range_bounds(date_range, today)
        if bounds is not None:
            # ISO text sorts chronologically, for both the date and date-time forms.
            start, end = bounds
            q = q.filter(
                TimeEntry.occurred_on >= start.isoformat(),
                TimeEntry.occurred_on < end.isoformat(),
            )

        return q.order_by(TimeEntry.occurred_on.desc(), TimeEntry.created_at.desc()).all()

    def _clone(self, template: TimeEntry, now: datetime) -> TimeEntry:
        fields = {name: getattr(template, name) for name in TEMPLATE_FIELDS}
        fields["occurred_on"] = now.isoformat(timespec="seconds")
        stamp = utcnow()
        clone = TimeEntry(
            id=str(uuid4()),
            user_id=self.user_id,
            created_at=stamp,
            updated_at=stamp,
            deleted_at=None,
            **_clean_fields(fields),
        )
        self.db.add(clone)
        return clone

    def duplicate(self, entry_id: str, *, now: Optional[datetime] = None) -> TimeEntry:
        return self.bulk_duplicate([entry_id], now=now)[0]

    def bulk_duplicate(self, entry_ids: Iterable[str], *, now: Optional[datetime] = None) -> List[TimeEntry]:
        ids = list(dict.fromkeys(str(i) for i in entry_ids))
        if not ids:
            return []

        rows = {row.id: row for row in self._live_query().filter(TimeEntry.id.in_(ids)).all()}
        missing = [i for i in ids if i not in rows]
        if missing:
            raise EntryNotFoundError(missing)

        now = now or datetime.now()
        clones = [self._clone(rows[i], now) for i in ids]
        self.db.flush()

        logger.info("Time entries duplicated", extra={"user_id": self.user_id, "count": len(clones)})
        return clones

    def today_totals(self, *, now: Optional[datetime] = None) -> Dict[str, Any]:
        by_task = {activity.value: 0 for activity in Activity}
        total = 0
        for entry in self.list("today", now=now):
            by_task[entry.task] = by_task.get(entry.task, 0) + int(entry.minutes)
            total += int(entry.minutes)
        return {"total": total, "by_task": by_task}

    def storage_stats(self) -> Dict[str, int]:
        total, active = (
            self.db.query(
                func.count(TimeEntry.id),
                func.coalesce(func.sum(case((TimeEntry.deleted_at.is_(None), 1), else_=0)), 0),
            )
            .filter(TimeEntry.user_id == self.user_id)
            .one()
        )
        total = int(total or 0)
        active = int(active or 0)
        return {"total": total, "active": active, "deleted": total - active}
