from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.core.authorization import Role, require_role
from app.core.errors import PermissionDeniedError, UserNotFoundError
from app.database import SessionLocal
from app.schemas.admin import ActivityStats, AdminUser, RoleUpdate, StatusUpdate, UserListResponse
from app.schemas.time_entry import TimeEntryResponse
from app.services import admin_service

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats", response_model=ActivityStats)
def activity_stats(_role: Role = Depends(require_role(Role.ADMIN))):
    db = SessionLocal()
    try:
        return admin_service.get_activity_stats(db=db)
    finally:
        db.close()


@router.get("/users", response_model=UserListResponse)
def users(
    _role: Role = Depends(require_role(Role.ADMIN)),
    q: str = "",
    role: str = Query(default="all", pattern="^(all|user|admin|super_admin)$"),
    status: str = Query(default="all", pattern="^(all|active|inactive)$"),
    sort_by: str = Query(default="created_at", pattern="^(name|email|role|created_at)$"),
    order: str = Query(default="desc", pattern="^(asc|desc)$"),
):
    db = SessionLocal()
    try:
        rows = admin_service.list_users(db=db)
        filtered = admin_service.search_users(rows, q, role=role, active=status, sort_by=sort_by, order=order)
        return {
            "users": filtered,
            "counts": admin_service.count_users(rows),
        }
    finally:
        db.close()


@router.get("/users/{user_id}/activity", response_model=List[TimeEntryResponse])
def user_activity(user_id: str, _role: Role = Depends(require_role(Role.ADMIN))):
    db = SessionLocal()
    try:
        return admin_service.get_user_activity(user_id=user_id, db=db)
    finally:
        db.close()


@router.put("/users/{user_id}/role", response_model=AdminUser)
def update_role(
    user_id: str,
    payload: RoleUpdate,
    actor_role: Role = Depends(require_role(Role.ADMIN)),
):
    db = SessionLocal()
    try:
        profile = admin_service.update_user_role(actor_role=actor_role, user_id=user_id, role=payload.role, db=db)
        db.commit()
        db.refresh(profile)
        return profile
    except UserNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PermissionDeniedError as exc:
        db.rollback()
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.put("/users/{user_id}/status", response_model=AdminUser)
def update_status(
    user_id: str,
    payload: StatusUpdate,
    request: Request,
    actor_role: Role = Depends(require_role(Role.ADMIN)),
):
    db = SessionLocal()
    try:
        profile = admin_service.update_user_status(
            actor_id=request.state.user_id,
            actor_role=actor_role,
            user_id=user_id,
            is_active=payload.is_active,
            db=db,
        )
        db.commit()
        db.refresh(profile)
        return profile
    except UserNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PermissionDeniedError as exc:
        db.rollback()
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
