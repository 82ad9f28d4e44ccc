from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.core.errors import EntryNotFoundError, EntryValidationError, ExportError
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.time_entry import (
    BulkDeleteResponse,
    BulkIdsRequest,
    DateRange,
    SortDirection,
    SortField,
    StorageStatsResponse,
    TimeEntryCreate,
    TimeEntryResponse,
    TimeEntryUpdate,
    TodayTotalsResponse,
)
from app.services.export_service import FORMATS, export_entries, export_filename, media_type
from app.services.list_engine import ViewParams, derive
from app.services.time_entry_store import TimeEntryStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/time_entries",
    tags=["Time Entries"],
)


def _validation_error(exc: EntryValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field_errors": exc.field_errors})


def _not_found(exc: EntryNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail={"message": "Time entry not found", "ids": exc.entry_ids})


def _view_params(
    date_range: str,
    tasks: Optional[List[str]],
    search: str,
    sort_field: str,
    sort_direction: str,
    include_deleted: bool,
) -> ViewParams:
    try:
        return ViewParams(
            date_range=date_range,
            selected_tasks=frozenset(tasks or ()),
            search_query=search,
            sort_field=sort_field,
            sort_direction=sort_direction,
            include_deleted=include_deleted,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail={"field_errors": {"tasks": str(exc)}}) from exc


@router.post("", response_model=TimeEntryResponse, status_code=201)
def create_time_entry(
    payload: TimeEntryCreate,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = TimeEntryStore(db, user_id).create(payload)
        db.commit()
        db.refresh(entry)
        return entry
    except EntryValidationError as exc:
        db.rollback()
        raise _validation_error(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.get("", response_model=List[TimeEntryResponse])
def list_time_entries(
    user_id: str = Depends(require_auth),
    date_range: DateRange = "all",
    task: Optional[str] = None,
    include_deleted: bool = False,
):
    db = SessionLocal()
    try:
        try:
            return TimeEntryStore(db, user_id).list(date_range, task=task, include_deleted=include_deleted)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail={"field_errors": {"task": str(exc)}}) from exc
    finally:
        db.close()


@router.get("/history", response_model=List[TimeEntryResponse])
def history(
    user_id: str = Depends(require_auth),
    date_range: DateRange = "today",
    tasks: Optional[List[str]] = Query(default=None),
    search: str = "",
    sort_field: SortField = "occurred_on",
    sort_direction: SortDirection = "desc",
    include_deleted: bool = False,
):
    params = _view_params(date_range, tasks, search, sort_field, sort_direction, include_deleted)
    now = datetime.now()

    db = SessionLocal()
    try:
        entries = TimeEntryStore(db, user_id).list("all", include_deleted=include_deleted, now=now)
        return derive(entries, params, now)
    finally:
        db.close()


@router.get("/export")
def export_time_entries(
    user_id: str = Depends(require_auth),
    format: str = Query(default="csv"),
    date_range: DateRange = "today",
    tasks: Optional[List[str]] = Query(default=None),
    search: str = "",
    sort_field: SortField = "occurred_on",
    sort_direction: SortDirection = "desc",
):
    if format not in FORMATS:
        raise HTTPException(status_code=422, detail={"field_errors": {"format": f"Unsupported export format: {format}"}})

    params = _view_params(date_range, tasks, search, sort_field, sort_direction, False)
    now = datetime.now()

    db = SessionLocal()
    try:
        entries = TimeEntryStore(db, user_id).list("all", now=now)
        rows = derive(entries, params, now)
        try:
            payload = export_entries(rows, format)
        except ExportError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        db.close()

    filename = export_filename(date_range, format, now.date())
    return Response(
        content=payload,
        media_type=media_type(format),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/today_totals", response_model=TodayTotalsResponse)
def today_totals(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return TimeEntryStore(db, user_id).today_totals()
    finally:
        db.close()


@router.get("/stats", response_model=StorageStatsResponse)
def storage_stats(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return TimeEntryStore(db, user_id).storage_stats()
    finally:
        db.close()


@router.post("/bulk_delete", response_model=BulkDeleteResponse)
def bulk_delete(
    payload: BulkIdsRequest,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        deleted = TimeEntryStore(db, user_id).soft_delete(payload.ids)
        db.commit()
        return {"deleted": deleted}
    except EntryNotFoundError as exc:
        db.rollback()
        raise _not_found(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.post("/bulk_duplicate", response_model=List[TimeEntryResponse], status_code=201)
def bulk_duplicate(
    payload: BulkIdsRequest,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        clones = TimeEntryStore(db, user_id).bulk_duplicate(payload.ids)
        db.commit()
        for clone in clones:
            db.refresh(clone)
        return clones
    except EntryNotFoundError as exc:
        db.rollback()
        raise _not_found(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.get("/{entry_id}", response_model=TimeEntryResponse)
def get_time_entry(
    entry_id: str,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = TimeEntryStore(db, user_id).get(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Time entry not found")
        return entry
    finally:
        db.close()


@router.patch("/{entry_id}", response_model=TimeEntryResponse)
def update_time_entry(
    entry_id: str,
    payload: TimeEntryUpdate,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = TimeEntryStore(db, user_id).update(entry_id, payload)
        db.commit()
        db.refresh(entry)
        return entry
    except EntryNotFoundError as exc:
        db.rollback()
        raise _not_found(exc) from exc
    except EntryValidationError as exc:
        db.rollback()
        raise _validation_error(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.delete("/{entry_id}", response_model=BulkDeleteResponse)
def delete_time_entry(
    entry_id: str,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        deleted = TimeEntryStore(db, user_id).soft_delete([entry_id])
        db.commit()
        return {"deleted": deleted}
    except EntryNotFoundError as exc:
        db.rollback()
        raise _not_found(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.post("/{entry_id}/duplicate", response_model=TimeEntryResponse, status_code=201)
def duplicate_time_entry(
    entry_id: str,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        clone = TimeEntryStore(db, user_id).duplicate(entry_id)
        db.commit()
        db.refresh(clone)
        return clone
    except EntryNotFoundError as exc:
        db.rollback()
        raise _not_found(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
