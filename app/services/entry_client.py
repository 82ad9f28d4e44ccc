from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Protocol

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.models.time_entry import TimeEntry
from app.services.time_entry_store import TimeEntryStore


class EntryClient(Protocol):
    """Asynchronous persistence contract consumed by the history panel.

    Every call may raise; callers must not assume success.
    """

    async def create(self, data: Any) -> TimeEntry: ...

    async def update(self, entry_id: str, patch: Any) -> TimeEntry: ...

    async def soft_delete(self, entry_ids: List[str]) -> None: ...

    async def list(
        self,
        date_range: str = "all",
        task: Optional[Any] = None,
        include_deleted: bool = False,
    ) -> List[TimeEntry]: ...

    async def bulk_duplicate(self, entries: Iterable[TimeEntry]) -> List[TimeEntry]: ...


class StoreEntryClient:
    """``EntryClient`` over ``TimeEntryStore``: one session and one transaction per call."""

    def __init__(self, session_factory: Callable[[], Session], user_id: str):
        self._session_factory = session_factory
        self.user_id = str(user_id)

    def _run(self, operation: Callable[[TimeEntryStore], Any]) -> Any:
        db = self._session_factory()
        try:
            result = operation(TimeEntryStore(db, self.user_id))
            db.commit()
            return result
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def create(self, data: Any) -> TimeEntry:
        return await run_in_threadpool(self._run, lambda store: store.create(data))

    async def update(self, entry_id: str, patch: Any) -> TimeEntry:
        return await run_in_threadpool(self._run, lambda store: store.update(entry_id, patch))

    async def soft_delete(self, entry_ids: List[str]) -> None:
        await run_in_threadpool(self._run, lambda store: store.soft_delete(entry_ids))

    async def list(
        self,
        date_range: str = "all",
        task: Optional[Any] = None,
        include_deleted: bool = False,
    ) -> List[TimeEntry]:
        return await run_in_threadpool(
            self._run,
            lambda store: store.list(date_range, task=task, include_deleted=include_deleted),
        )

    async def bulk_duplicate(self, entries: Iterable[TimeEntry]) -> List[TimeEntry]:
        ids = [entry.id for entry in entries]
        return await run_in_threadpool(self._run, lambda store: store.bulk_duplicate(ids))
