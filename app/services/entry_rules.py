from typing import Any, Dict, Optional

from app.core.errors import EntryValidationError
from app.models.activity import Activity

MIN_MINUTES = 1
MAX_MINUTES = 480


def collect_entry_errors(
    *,
    task: Any,
    minutes: Any,
    other_task: Optional[str] = None,
    patient_count: Any = None,
) -> Dict[str, str]:
    """Save-time invariants shared by quick entry, inline edit and the store."""
    errors: Dict[str, str] = {}

    activity = None
    try:
        activity = Activity.parse(task)
    except ValueError:
        errors["task"] = "Please select a valid task"

    if isinstance(minutes, bool) or not isinstance(minutes, int):
        errors["minutes"] = "Please enter a whole number"
    elif minutes < MIN_MINUTES:
        errors["minutes"] = "Minutes must be at least 1"
    elif minutes > MAX_MINUTES:
        errors["minutes"] = "Minutes cannot exceed 480 (8 hours)"

    if activity is Activity.OTHER and not (other_task or "").strip():
        errors["other_task"] = "Please specify the task name"

    if activity is not None and activity.is_patient_care:
        if patient_count is None or patient_count == "":
            errors["patient_count"] = "Number of patients is required for patient care tasks"
        elif isinstance(patient_count, bool) or not isinstance(patient_count, int):
            errors["patient_count"] = "Please enter a whole number"
        elif patient_count < 0:
            errors["patient_count"] = "Number of patients cannot be negative"

    return errors


def validate_entry(**fields) -> None:
    errors = collect_entry_errors(**fields)
    if errors:
        raise EntryValidationError(errors)


def coerce_int(value: Any) -> Any:
    """Best-effort int conversion for text typed into a form field.

    Unparseable input is returned unchanged so validation reports it.
    """
    if value is None or isinstance(value, bool) or isinstance(value, int):
        return value
    text = str(value).strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        return value
