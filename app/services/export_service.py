from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from app.core.errors import ExportError
from app.models.activity import Activity

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Date",
    "Task",
    "Other Task",
    "Minutes",
    "Patient Count",
    "Typical Day",
    "Comment",
    "Created At",
    "Updated At",
]

XLSX_SHEET_TITLE = "Time Entries"
XLSX_COLUMN_WIDTHS = [12, 45, 20, 10, 14, 12, 30, 20, 20]

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

FORMATS = ("csv", "xlsx")


def _timestamp(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return str(value)


def _task_label(task: Any) -> str:
    return task.value if isinstance(task, Activity) else str(task)


def entry_to_row(entry: Any) -> List[Any]:
    patient_count = entry.patient_count
    return [
        entry.occurred_on if isinstance(entry.occurred_on, str) else _timestamp(entry.occurred_on),
        _task_label(entry.task),
        entry.other_task or "",
        int(entry.minutes),
        "" if patient_count is None else int(patient_count),
        "Yes" if entry.is_typical_day else "No",
        entry.comment or "",
        _timestamp(entry.created_at),
        _timestamp(entry.updated_at),
    ]


def generate_csv(entries: Iterable[Any]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow(entry_to_row(entry))
    return buffer.getvalue()


def generate_xlsx(entries: Iterable[Any]) -> bytes:
    import openpyxl
    from openpyxl.utils import get_column_letter

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = XLSX_SHEET_TITLE

    ws.append(CSV_HEADERS)
    for entry in entries:
        ws.append(entry_to_row(entry))

    for col, width in enumerate(XLSX_COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(col)].width = width

    stream = io.BytesIO()
    wb.save(stream)
    return stream.getvalue()


def export_filename(date_range: str, fmt: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"sparc_entries_{today.isoformat()}_{date_range}.{fmt}"


def media_type(fmt: str) -> str:
    return CSV_MEDIA_TYPE if fmt == "csv" else XLSX_MEDIA_TYPE


def export_entries(entries: Iterable[Any], fmt: str) -> bytes:
    """Serialize already-derived rows; callers pass exactly what is on screen."""
    if fmt not in FORMATS:
        raise ExportError(f"Unsupported export format: {fmt!r}")

    rows = list(entries)
    try:
        if fmt == "csv":
            payload = generate_csv(rows).encode("utf-8")
        else:
            payload = generate_xlsx(rows)
    except Exception as exc:
        logger.exception("Export failed", extra={"format": fmt, "rows": len(rows)})
        raise ExportError(f"Failed to export {fmt.upper()} file") from exc

    logger.info("Entries exported", extra={"format": fmt, "rows": len(rows)})
    return payload
