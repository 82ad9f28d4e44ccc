import asyncio
from datetime import datetime
from types import SimpleNamespace

import pytest

from app.core.errors import EntryNotFoundError
from app.models.activity import Activity
from app.services.inline_edit import InlineEditor


def _entry(entry_id="e1", task=Activity.PAF, minutes=30, patient_count=3, other_task=None, comment=None):
    return SimpleNamespace(
        id=entry_id,
        task=task.value,
        other_task=other_task,
        minutes=minutes,
        patient_count=patient_count,
        is_typical_day=True,
        occurred_on="2026-10-19",
        comment=comment,
        created_at=datetime(2026, 10, 19, 8),
        updated_at=datetime(2026, 10, 19, 8),
        deleted_at=None,
    )


class FakeClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.updates = []

    async def update(self, entry_id, patch):
        self.updates.append((entry_id, dict(patch)))
        if self.fail:
            raise EntryNotFoundError(entry_id)
        return SimpleNamespace(id=entry_id, **patch)


def test_start_enters_editing_with_a_shadow_copy():
    editor = InlineEditor()
    entry = _entry(comment=None)

    editor.start(entry)

    assert editor.state == "editing"
    assert editor.is_editing("e1")
    assert editor.draft.comment == ""
    assert editor.draft.minutes == 30

    editor.set_field("minutes", 45)
    assert entry.minutes == 30


def test_only_one_row_is_editable_and_switching_discards_the_draft():
    editor = InlineEditor()
    editor.start(_entry("e1"))
    editor.set_field("minutes", 99)

    editor.start(_entry("e2", minutes=10))

    assert editor.is_editing("e2")
    assert not editor.is_editing("e1")
    assert editor.draft.minutes == 10


def test_set_field_requires_an_active_edit_and_a_known_field():
    editor = InlineEditor()
    with pytest.raises(RuntimeError):
        editor.set_field("minutes", 10)

    editor.start(_entry())
    with pytest.raises(KeyError):
        editor.set_field("user_id", "someone-else")


def test_invalid_draft_sets_field_errors_and_skips_the_client():
    editor = InlineEditor()
    client = FakeClient()
    editor.start(_entry())
    editor.set_field("minutes", "abc")
    editor.set_field("patient_count", "")

    result = asyncio.run(editor.save(client))

    assert result is None
    assert client.updates == []
    assert editor.state == "editing"
    assert editor.field_errors == {
        "minutes": "Please enter a whole number",
        "patient_count": "Number of patients is required for patient care tasks",
    }


def test_editing_a_field_clears_its_error():
    editor = InlineEditor()
    editor.start(_entry())
    editor.set_field("minutes", 0)
    asyncio.run(editor.save(FakeClient()))
    assert "minutes" in editor.field_errors

    editor.set_field("minutes", 20)
    assert "minutes" not in editor.field_errors


def test_successful_save_returns_to_idle_and_notifies():
    editor = InlineEditor()
    client = FakeClient()
    editor.start(_entry())
    editor.set_field("minutes", "45")
    editor.set_field("comment", "Reviewed cultures")

    updated = asyncio.run(editor.save(client))

    assert updated.minutes == 45
    assert editor.state == "idle"
    assert client.updates[0][0] == "e1"
    assert client.updates[0][1]["comment"] == "Reviewed cultures"
    assert editor.notifications.last.kind == "success"
    assert editor.notifications.last.message == "Entry updated successfully"


def test_patch_clears_fields_that_do_not_apply_to_the_new_task():
    editor = InlineEditor()
    client = FakeClient()
    editor.start(_entry(task=Activity.PAF, patient_count=5))
    editor.set_field("task", Activity.EMAILS.value)
    editor.set_field("other_task", "stale")

    asyncio.run(editor.save(client))

    patch = client.updates[0][1]
    assert patch["task"] == Activity.EMAILS.value
    assert patch["patient_count"] is None
    assert patch["other_task"] is None


def test_failed_save_stays_in_editing_and_keeps_the_draft():
    editor = InlineEditor()
    editor.start(_entry())
    editor.set_field("minutes", 60)

    result = asyncio.run(editor.save(FakeClient(fail=True)))

    assert result is None
    assert editor.state == "editing"
    assert editor.draft.minutes == 60
    assert editor.saving is False
    assert editor.notifications.last.kind == "error"
    assert editor.notifications.last.message == "Failed to update entry"


class SlowClient(FakeClient):
    async def update(self, entry_id, patch):
        self.updates.append((entry_id, dict(patch)))
        await asyncio.sleep(0.01)
        return SimpleNamespace(id=entry_id, **patch)


def test_repeated_save_while_in_flight_sends_one_update():
    editor = InlineEditor()
    client = SlowClient()
    editor.start(_entry())
    editor.set_field("minutes", 50)

    async def double_save():
        return await asyncio.gather(editor.save(client), editor.save(client))

    first, second = asyncio.run(double_save())

    assert first.minutes == 50
    assert second is None
    assert len(client.updates) == 1
    assert [n.kind for n in editor.notifications.items] == ["success"]
    assert editor.state == "idle"
    assert editor.saving is False


def test_keyboard_contract():
    editor = InlineEditor()
    client = FakeClient()

    assert asyncio.run(editor.handle_key("Escape", client)) is None

    editor.start(_entry())
    assert asyncio.run(editor.handle_key("Enter", client)) is None
    assert editor.state == "editing"

    assert asyncio.run(editor.handle_key("Enter", client, meta=True)) == "save"
    assert editor.state == "idle"
    assert len(client.updates) == 1

    editor.start(_entry())
    assert asyncio.run(editor.handle_key("Escape", client)) == "cancel"
    assert editor.state == "idle"
    assert len(client.updates) == 1
