"""State behind the history table: view parameters, inline edit, selection, bulk actions.

Everything is single-threaded and event driven. Persistence goes through an
``EntryClient``; each failure is turned into a notification and leaves the
state it was about to change untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from app.services.dates import utcnow
from app.services.debounce import Debouncer
from app.services.export_service import export_entries
from app.services.inline_edit import InlineEditor
from app.services.list_engine import ViewParams, derive
from app.services.notifications import Notifications
from app.services.selection import Selection

logger = logging.getLogger(__name__)


class HistoryPanel:
    def __init__(
        self,
        client,
        entries: Iterable[Any] = (),
        *,
        params: Optional[ViewParams] = None,
        clock: Callable[[], datetime] = datetime.now,
        debounce_seconds: Optional[float] = None,
    ):
        self.client = client
        self.entries: List[Any] = list(entries)
        self.params = params or ViewParams()
        self.clock = clock
        self.notifications = Notifications()
        self.editor = InlineEditor(self.notifications)
        self.selection = Selection()
        self.search_text = self.params.search_query
        self.confirming_delete = False
        self._search = Debouncer(self._apply_search, debounce_seconds)

    # -- derivation -------------------------------------------------------

    def visible(self) -> List[Any]:
        return derive(self.entries, self.params, self.clock())

    def set_date_range(self, date_range: str) -> None:
        self.params = self.params.with_changes(date_range=date_range)

    def set_selected_tasks(self, tasks: Iterable[Any]) -> None:
        self.params = self.params.with_changes(selected_tasks=frozenset(tasks))

    def sort_by(self, sort_field: str) -> None:
        if self.params.sort_field == sort_field:
            direction = "asc" if self.params.sort_direction == "desc" else "desc"
            self.params = self.params.with_changes(sort_direction=direction)
        else:
            self.params = self.params.with_changes(sort_field=sort_field, sort_direction="desc")

    def type_search(self, text: str) -> None:
        """Record keystrokes; the query takes effect once typing pauses."""
        self.search_text = text
        self._search.submit(text)

    def flush_search(self) -> None:
        self._search.flush()

    def _apply_search(self, text: str) -> None:
        self.params = self.params.with_changes(search_query=text)

    # -- loading ----------------------------------------------------------

    async def refresh(self) -> bool:
        try:
            entries = await self.client.list("all")
        except Exception:
            logger.exception("Failed to load time entries")
            self.notifications.error("Failed to load entries")
            return False
        self.entries = list(entries)
        return True

    def _replace(self, updated: Any) -> None:
        for index, entry in enumerate(self.entries):
            if entry.id == updated.id:
                self.entries[index] = updated
                return

    # -- inline edit ------------------------------------------------------

    def start_edit(self, entry_id: str) -> None:
        for entry in self.entries:
            if entry.id == entry_id:
                self.editor.start(entry)
                return
        raise KeyError(entry_id)

    def cancel_edit(self) -> None:
        self.editor.cancel()

    async def save_edit(self) -> bool:
        updated = await self.editor.save(self.client)
        if updated is None:
            return False
        self._replace(updated)
        return True

    async def handle_key(self, key: str, *, ctrl: bool = False, meta: bool = False) -> Optional[str]:
        if key == "Escape" and self.confirming_delete:
            self.cancel_bulk_delete()
            return "cancel"
        action = self.editor.key_action(key, ctrl=ctrl, meta=meta)
        if action == "save":
            await self.save_edit()
        elif action == "cancel":
            self.cancel_edit()
        return action

    # -- selection & bulk -------------------------------------------------

    def toggle_select(self, entry_id: str) -> None:
        self.selection.toggle(entry_id)

    def toggle_select_all(self) -> None:
        self.selection.toggle_all(self.visible())

    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self.visible())

    def request_bulk_delete(self) -> bool:
        if not self.selection.selected_visible(self.visible()):
            return False
        self.confirming_delete = True
        return True

    def cancel_bulk_delete(self) -> None:
        self.confirming_delete = False

    async def confirm_bulk_delete(self) -> bool:
        if not self.confirming_delete:
            return False
        self.confirming_delete = False

        ids = [entry.id for entry in self.selection.selected_visible(self.visible())]
        if not ids:
            return False
        try:
            await self.client.soft_delete(ids)
        except Exception:
            logger.exception("Bulk delete failed", extra={"count": len(ids)})
            self.notifications.error("Failed to delete entries")
            return False

        stamp = utcnow()
        deleted = set(ids)
        for entry in self.entries:
            if entry.id in deleted:
                entry.deleted_at = stamp
        self.selection.clear()
        self.notifications.success(f"Deleted {len(ids)} entries")
        return True

    async def bulk_duplicate(self) -> bool:
        templates = self.selection.selected_visible(self.visible())
        if not templates:
            return False
        try:
            created = await self.client.bulk_duplicate(templates)
        except Exception:
            logger.exception("Bulk duplicate failed", extra={"count": len(templates)})
            self.notifications.error("Failed to duplicate entries")
            return False

        self.entries.extend(created or [])
        self.selection.clear()
        self.notifications.success(f"Duplicated {len(templates)} entries")
        return True

    # -- export -----------------------------------------------------------

    def export(self, fmt: str = "csv") -> Optional[bytes]:
        rows = self.visible()
        try:
            payload = export_entries(rows, fmt)
        except Exception:
            self.notifications.error(f"Failed to export {fmt.upper()} file")
            return None
        self.notifications.success(f"Exported {len(rows)} entries to {fmt.upper()}")
        return payload
