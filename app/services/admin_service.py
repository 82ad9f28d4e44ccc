import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.authorization import Role, parse_role
from app.core.errors import PermissionDeniedError, UserNotFoundError
from app.models.activity import Activity
from app.models.profile import Profile
from app.models.time_entry import TimeEntry
from app.services.dates import utcnow

logger = logging.getLogger(__name__)

DEFAULT_RECENT_ACTIVITY_LIMIT = 10

USER_SORT_FIELDS = ("name", "email", "role", "created_at")
STATUS_FILTERS = ("all", "active", "inactive")


def _recent_activity_limit() -> int:
    raw = os.getenv("RECENT_ACTIVITY_LIMIT")
    if not raw:
        return DEFAULT_RECENT_ACTIVITY_LIMIT
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning("Ignoring invalid RECENT_ACTIVITY_LIMIT", extra={"value": raw})
        return DEFAULT_RECENT_ACTIVITY_LIMIT


def _category_of(task: str) -> str:
    try:
        return Activity.parse(task).category
    except ValueError:
        return task.split(" - ", 1)[0]


def get_activity_stats(*, db: Session) -> Dict[str, Any]:
    live = TimeEntry.deleted_at.is_(None)

    total_entries, total_minutes, unique_users = (
        db.query(
            func.count(TimeEntry.id),
            func.coalesce(func.sum(TimeEntry.minutes), 0),
            func.count(func.distinct(TimeEntry.user_id)),
        )
        .filter(live)
        .one()
    )

    per_task = (
        db.query(TimeEntry.task, func.sum(TimeEntry.minutes))
        .filter(live)
        .group_by(TimeEntry.task)
        .all()
    )

    activity_breakdown: Dict[str, int] = {}
    category_breakdown: Dict[str, int] = {}
    for task, minutes in per_task:
        minutes = int(minutes or 0)
        activity_breakdown[task] = minutes
        category = _category_of(task)
        category_breakdown[category] = category_breakdown.get(category, 0) + minutes

    recent_rows = (
        db.query(TimeEntry, Profile.name, Profile.email)
        .outerjoin(Profile, Profile.id == TimeEntry.user_id)
        .filter(live)
        .order_by(TimeEntry.created_at.desc(), TimeEntry.id.desc())
        .limit(_recent_activity_limit())
        .all()
    )
    recent_activity = [
        {
            "id": entry.id,
            "user_id": entry.user_id,
            "user_name": name,
            "user_email": email,
            "task": entry.task,
            "minutes": entry.minutes,
            "occurred_on": entry.occurred_on,
            "created_at": entry.created_at,
        }
        for entry, name, email in recent_rows
    ]

    return {
        "total_entries": int(total_entries or 0),
        "total_minutes": int(total_minutes or 0),
        "unique_users": int(unique_users or 0),
        "activity_breakdown": activity_breakdown,
        "category_breakdown": category_breakdown,
        "recent_activity": recent_activity,
    }


def list_users(*, db: Session) -> List[Profile]:
    return db.query(Profile).order_by(Profile.created_at.desc(), Profile.id.asc()).all()


def _field(user: Any, name: str):
    if isinstance(user, dict):
        return user.get(name)
    return getattr(user, name, None)


def search_users(
    users: Iterable[Any],
    term: str = "",
    role: str = "all",
    active: str = "all",
    sort_by: str = "created_at",
    order: str = "desc",
) -> List[Any]:
    """In-memory filter and sort for the user-search panel. Display only."""
    if sort_by not in USER_SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort_by!r}")
    if order not in ("asc", "desc"):
        raise ValueError(f"Unknown sort order: {order!r}")
    if active not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {active!r}")

    result = list(users)

    needle = (term or "").strip().lower()
    if needle:
        result = [
            u
            for u in result
            if needle in (_field(u, "name") or "").lower() or needle in (_field(u, "email") or "").lower()
        ]

    if role != "all":
        result = [u for u in result if (_field(u, "role") or Role.USER.value) == role]

    if active != "all":
        wanted = active == "active"
        result = [u for u in result if (_field(u, "is_active") is not False) == wanted]

    def key(u):
        value = _field(u, sort_by)
        if sort_by == "created_at":
            return value or datetime.min
        return value or ""

    return sorted(result, key=key, reverse=order == "desc")


def get_user_activity(*, user_id: str, db: Session) -> List[TimeEntry]:
    return (
        db.query(TimeEntry)
        .filter(TimeEntry.user_id == str(user_id))
        .filter(TimeEntry.deleted_at.is_(None))
        .order_by(TimeEntry.occurred_on.desc(), TimeEntry.created_at.desc())
        .all()
    )


def _load_user(db: Session, user_id: str) -> Profile:
    profile = db.query(Profile).filter(Profile.id == str(user_id)).first()
    if profile is None:
        raise UserNotFoundError(user_id)
    return profile


def update_user_role(*, actor_role: Role, user_id: str, role: str, db: Session) -> Profile:
    new_role = parse_role(role)
    profile = _load_user(db, user_id)
    current = parse_role(profile.role or Role.USER.value)

    touches_super_admin = Role.SUPER_ADMIN in (new_role, current)
    if touches_super_admin and actor_role != Role.SUPER_ADMIN:
        raise PermissionDeniedError("Only a super admin can grant or revoke super admin")

    profile.role = new_role.value
    profile.updated_at = utcnow()
    db.flush()

    logger.info(
        "User role changed",
        extra={"user_id": profile.id, "from_role": current.value, "to_role": new_role.value},
    )
    return profile


def update_user_status(
    *,
    actor_id: str,
    actor_role: Role,
    user_id: str,
    is_active: bool,
    db: Session,
) -> Profile:
    if str(actor_id) == str(user_id) and not is_active:
        raise PermissionDeniedError("You cannot deactivate your own account")

    profile = _load_user(db, user_id)
    if (profile.role or Role.USER.value) == Role.SUPER_ADMIN.value and actor_role != Role.SUPER_ADMIN:
        raise PermissionDeniedError("Only a super admin can change a super admin's status")

    profile.is_active = bool(is_active)
    profile.updated_at = utcnow()
    db.flush()

    logger.info("User status changed", extra={"user_id": profile.id, "is_active": profile.is_active})
    return profile


def count_users(users: Iterable[Any]) -> Dict[str, int]:
    users = list(users)
    return {
        "total": len(users),
        "active": sum(1 for u in users if _field(u, "is_active") is not False),
        "admins": sum(1 for u in users if _field(u, "role") in (Role.ADMIN.value, Role.SUPER_ADMIN.value)),
    }
