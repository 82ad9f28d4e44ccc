from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.models.activity import Activity
from app.services.dates import normalize_occurred_on
from app.services.entry_rules import MAX_MINUTES, MIN_MINUTES, collect_entry_errors

DateRange = Literal["today", "week", "all"]
SortField = Literal["occurred_on", "task", "minutes"]
SortDirection = Literal["asc", "desc"]


def _local_now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class TimeEntryCreate(BaseModel):
    """Quick-entry form payload."""

    task: Activity
    other_task: Optional[str] = None
    minutes: int = Field(ge=MIN_MINUTES, le=MAX_MINUTES)
    patient_count: Optional[int] = Field(default=None, ge=0)
    is_typical_day: bool = True
    occurred_on: str = Field(default_factory=_local_now_iso)
    comment: Optional[str] = None

    @field_validator("task", mode="before")
    @classmethod
    def _parse_task(cls, value):
        return Activity.parse(value)

    @field_validator("occurred_on", mode="before")
    @classmethod
    def _normalize_occurred_on(cls, value):
        try:
            return normalize_occurred_on(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("occurred_on must be an ISO date or date-time") from exc

    @model_validator(mode="after")
    def _check_conditional_fields(self):
        errors = collect_entry_errors(
            task=self.task,
            minutes=self.minutes,
            other_task=self.other_task,
            patient_count=self.patient_count,
        )
        if errors:
            # ctx carries the per-field messages through to the 422 body.
            raise PydanticCustomError("entry_fields", "; ".join(errors.values()), {"field_errors": errors})

        if self.task is Activity.OTHER:
            self.other_task = self.other_task.strip()
        else:
            self.other_task = None
        if not self.task.is_patient_care:
            self.patient_count = None
        if self.comment is not None and not self.comment.strip():
            self.comment = None
        return self


class TimeEntryUpdate(BaseModel):
    """Partial patch; cross-field rules are checked against the merged record."""

    task: Optional[Activity] = None
    other_task: Optional[str] = None
    minutes: Optional[int] = Field(default=None, ge=MIN_MINUTES, le=MAX_MINUTES)
    patient_count: Optional[int] = Field(default=None, ge=0)
    is_typical_day: Optional[bool] = None
    occurred_on: Optional[str] = None
    comment: Optional[str] = None

    @field_validator("task", mode="before")
    @classmethod
    def _parse_task(cls, value):
        if value is None:
            return None
        return Activity.parse(value)

    @field_validator("occurred_on", mode="before")
    @classmethod
    def _normalize_occurred_on(cls, value):
        if value is None:
            return None
        try:
            return normalize_occurred_on(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("occurred_on must be an ISO date or date-time") from exc


class TimeEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task: Activity
    other_task: Optional[str]
    minutes: int
    patient_count: Optional[int]
    is_typical_day: bool
    occurred_on: str
    comment: Optional[str]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime]


class BulkIdsRequest(BaseModel):
    ids: List[str] = Field(min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


class TodayTotalsResponse(BaseModel):
    total: int
    by_task: Dict[str, int]


class StorageStatsResponse(BaseModel):
    total: int
    active: int
    deleted: int
