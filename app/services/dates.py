"""Date handling shared by the store, the list engine and export.

``occurred_on`` arrives either as a plain date (``2026-10-19``) or as a
date-time (``2026-10-19T14:05:00Z``). The canonical "day" of an entry is the
calendar date written in the stored value; the canonical "today" is the local
calendar date of a single ``now`` sampled by the caller.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Tuple, Union

DateLike = Union[str, date, datetime]


def utcnow() -> datetime:
    # Stored timestamps are naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_occurred_on(value: DateLike) -> datetime:
    """Return a naive datetime for either accepted form.

    Aware values are normalised to UTC so mixed inputs stay comparable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if "T" not in text and " " not in text:
            d = date.fromisoformat(text)
            return datetime(d.year, d.month, d.day)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def calendar_date(value: DateLike) -> date:
    """Date portion of the stored value, with no timezone shifting."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    return date.fromisoformat(text[:10])


def normalize_occurred_on(value: DateLike) -> str:
    """Return the extended ISO text that gets persisted.

    Basic forms such as ``20261021T101500`` are rebuilt as ``2026-10-21T10:15:00``
    so stored values compare correctly against ``YYYY-MM-DD`` bounds. Offsets
    are kept.
    """
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        raise ValueError("Date is required")
    if "T" not in text and " " not in text:
        return date.fromisoformat(text).isoformat()
    return datetime.fromisoformat(text.replace("Z", "+00:00")).isoformat(timespec="seconds")


def week_bounds(today: date) -> Tuple[date, date]:
    """Monday..Sunday (inclusive) of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def range_bounds(date_range: str, today: date):
    """Half-open ``[start, end)`` calendar bounds for a named range, or None for ``all``."""
    if date_range == "today":
        return today, today + timedelta(days=1)
    if date_range == "week":
        monday, sunday = week_bounds(today)
        return monday, sunday + timedelta(days=1)
    if date_range == "all":
        return None
    raise ValueError(f"Unknown date range: {date_range!r}")
