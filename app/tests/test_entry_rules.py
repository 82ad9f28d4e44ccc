import pytest
from pydantic import ValidationError

from app.core.errors import EntryValidationError
from app.models.activity import PATIENT_CARE_ACTIVITIES, Activity
from app.schemas.time_entry import TimeEntryCreate
from app.services.entry_rules import coerce_int, collect_entry_errors, validate_entry


def test_activity_parse_accepts_labels_and_legacy_codes():
    assert Activity.parse("Patient Care - Prospective Audit & Feedback") is Activity.PAF
    assert Activity.parse("PAF") is Activity.PAF
    assert Activity.parse("emails") is Activity.EMAILS
    assert Activity.parse("  Tracking - AMU ") is Activity.AMU
    with pytest.raises(ValueError):
        Activity.parse("Coffee break")


def test_activity_categories_and_patient_care_set():
    assert Activity.CLINICAL_ROUNDS.category == "Patient Care"
    assert Activity.SHARING_DATA.category == "Reporting"
    assert {a for a in Activity if a.is_patient_care} == set(PATIENT_CARE_ACTIVITIES)
    assert len(PATIENT_CARE_ACTIVITIES) == 3


def test_minutes_bounds():
    assert collect_entry_errors(task="EMAILS", minutes=1) == {}
    assert collect_entry_errors(task="EMAILS", minutes=480) == {}
    assert collect_entry_errors(task="EMAILS", minutes=0)["minutes"] == "Minutes must be at least 1"
    assert collect_entry_errors(task="EMAILS", minutes=481)["minutes"] == "Minutes cannot exceed 480 (8 hours)"
    assert collect_entry_errors(task="EMAILS", minutes="30")["minutes"] == "Please enter a whole number"
    assert collect_entry_errors(task="EMAILS", minutes=True)["minutes"] == "Please enter a whole number"


def test_other_requires_a_name():
    errors = collect_entry_errors(task=Activity.OTHER, minutes=10, other_task="   ")
    assert errors == {"other_task": "Please specify the task name"}
    assert collect_entry_errors(task=Activity.OTHER, minutes=10, other_task="Antibiogram") == {}


@pytest.mark.parametrize("activity", sorted(PATIENT_CARE_ACTIVITIES, key=lambda a: a.name))
def test_patient_care_requires_patient_count(activity):
    missing = collect_entry_errors(task=activity, minutes=15)
    assert missing["patient_count"] == "Number of patients is required for patient care tasks"

    negative = collect_entry_errors(task=activity, minutes=15, patient_count=-1)
    assert negative["patient_count"] == "Number of patients cannot be negative"

    assert collect_entry_errors(task=activity, minutes=15, patient_count=0) == {}


def test_patient_count_is_not_required_elsewhere():
    assert collect_entry_errors(task=Activity.AMR, minutes=15) == {}


def test_validate_entry_raises_with_every_field_error():
    with pytest.raises(EntryValidationError) as excinfo:
        validate_entry(task="PAF", minutes=0)

    assert set(excinfo.value.field_errors) == {"minutes", "patient_count"}


def test_coerce_int_keeps_unparseable_text():
    assert coerce_int(" 45 ") == 45
    assert coerce_int("") is None
    assert coerce_int("abc") == "abc"
    assert coerce_int(7) == 7


def test_quick_entry_schema_normalises_conditional_fields():
    entry = TimeEntryCreate(
        task="EMAILS",
        minutes=30,
        other_task="ignored",
        patient_count=4,
        occurred_on="2026-10-19",
        comment="   ",
    )

    assert entry.task is Activity.EMAILS
    assert entry.other_task is None
    assert entry.patient_count is None
    assert entry.comment is None
    assert entry.is_typical_day is True


def test_quick_entry_schema_trims_other_task():
    entry = TimeEntryCreate(task=Activity.OTHER.value, minutes=10, other_task="  Antibiogram  ")
    assert entry.other_task == "Antibiogram"


def test_quick_entry_schema_defaults_occurred_on_to_now():
    entry = TimeEntryCreate(task="AMU", minutes=10)
    assert "T" in entry.occurred_on


def test_quick_entry_schema_rejects_invalid_input():
    with pytest.raises(ValidationError):
        TimeEntryCreate(task="PAF", minutes=30)
    with pytest.raises(ValidationError):
        TimeEntryCreate(task="AMU", minutes=481)
    with pytest.raises(ValidationError):
        TimeEntryCreate(task="AMU", minutes=30, occurred_on="yesterday")
    with pytest.raises(ValidationError):
        TimeEntryCreate(task="Nope", minutes=30)
