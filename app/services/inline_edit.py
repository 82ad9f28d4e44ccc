from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from app.models.activity import Activity
from app.services.entry_rules import coerce_int, collect_entry_errors
from app.services.notifications import Notifications

logger = logging.getLogger(__name__)

EDIT_FIELDS = ("task", "other_task", "patient_count", "minutes", "comment", "is_typical_day")


@dataclass
class EditDraft:
    """Shadow copy of the editable fields of one row."""

    task: Any
    other_task: Optional[str]
    patient_count: Any
    minutes: Any
    comment: Optional[str]
    is_typical_day: bool

    @classmethod
    def from_entry(cls, entry: Any) -> "EditDraft":
        return cls(
            task=entry.task,
            other_task=entry.other_task or "",
            patient_count=entry.patient_count,
            minutes=entry.minutes,
            comment=entry.comment or "",
            is_typical_day=bool(entry.is_typical_day),
        )


class InlineEditor:
    """idle <-> editing(row_id); at most one row is editable at a time."""

    def __init__(self, notifications: Optional[Notifications] = None):
        self.notifications = notifications if notifications is not None else Notifications()
        self.editing_id: Optional[str] = None
        self.draft: Optional[EditDraft] = None
        self.field_errors: Dict[str, str] = {}
        self.saving = False

    @property
    def state(self) -> str:
        return "idle" if self.editing_id is None else "editing"

    def is_editing(self, row_id: str) -> bool:
        return self.editing_id is not None and self.editing_id == row_id

    def start(self, entry: Any) -> None:
        if self.editing_id is not None:
            self.cancel()
        self.editing_id = entry.id
        self.draft = EditDraft.from_entry(entry)
        self.field_errors = {}

    def set_field(self, name: str, value: Any) -> None:
        if self.draft is None:
            raise RuntimeError("No row is being edited")
        if name not in EDIT_FIELDS:
            raise KeyError(name)
        setattr(self.draft, name, value)
        self.field_errors.pop(name, None)

    def cancel(self) -> None:
        self.editing_id = None
        self.draft = None
        self.field_errors = {}
        self.saving = False

    def build_patch(self) -> Dict[str, Any]:
        values = asdict(self.draft)
        values["minutes"] = coerce_int(values["minutes"])
        values["patient_count"] = coerce_int(values["patient_count"])

        task = None
        try:
            task = Activity.parse(values["task"])
        except ValueError:
            pass

        other_task = (values["other_task"] or "").strip()
        comment = values["comment"] or ""
        return {
            "task": task.value if task is not None else values["task"],
            "other_task": other_task if task is Activity.OTHER else None,
            "patient_count": values["patient_count"] if task is not None and task.is_patient_care else None,
            "minutes": values["minutes"],
            "comment": comment if comment.strip() else None,
            "is_typical_day": bool(values["is_typical_day"]),
        }

    async def save(self, client) -> Optional[Any]:
        """Validate, then persist; only a resolved update returns the editor to idle."""
        if self.editing_id is None or self.draft is None or self.saving:
            return None

        patch = self.build_patch()
        errors = collect_entry_errors(
            task=patch["task"],
            minutes=patch["minutes"],
            other_task=patch["other_task"],
            patient_count=patch["patient_count"],
        )
        if errors:
            self.field_errors = errors
            return None

        row_id = self.editing_id
        self.saving = True
        try:
            updated = await client.update(row_id, patch)
        except Exception as exc:
            logger.warning("Inline edit save failed", extra={"entry_id": row_id, "error": str(exc)})
            if self.editing_id == row_id:
                self.saving = False
            self.notifications.error("Failed to update entry")
            return None

        if self.editing_id == row_id:
            self.cancel()
        self.notifications.success("Entry updated successfully")
        return updated

    def key_action(self, key: str, *, ctrl: bool = False, meta: bool = False) -> Optional[str]:
        """Accelerator+Enter saves, Escape cancels; ignored while idle."""
        if self.editing_id is None:
            return None
        if key == "Enter" and (ctrl or meta):
            return "save"
        if key == "Escape":
            return "cancel"
        return None

    async def handle_key(self, key: str, client, *, ctrl: bool = False, meta: bool = False) -> Optional[str]:
        action = self.key_action(key, ctrl=ctrl, meta=meta)
        if action == "save":
            await self.save(client)
        elif action == "cancel":
            self.cancel()
        return action
