from enum import Enum

from fastapi import Depends, HTTPException, Request

from app.database import SessionLocal
from app.deps.auth import require_auth
from app.models.profile import Profile


class Role(Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ROLE_RANK = {
    Role.USER: 1,
    Role.ADMIN: 2,
    Role.SUPER_ADMIN: 3,
}


def parse_role(value) -> Role:
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown role: {value!r}") from None


def require_role(role: Role):
    def dependency(request: Request, user_id: str = Depends(require_auth)):
        db = SessionLocal()
        try:
            profile = db.query(Profile).filter(Profile.id == user_id).first()
        finally:
            db.close()

        if profile is None:
            raise HTTPException(status_code=403, detail="Profile not found")
        if not profile.is_active:
            raise HTTPException(status_code=403, detail="Account is deactivated")

        try:
            user_role = parse_role(profile.role or Role.USER.value)
        except ValueError as exc:
            raise HTTPException(status_code=403, detail="Invalid role") from exc

        if ROLE_RANK[user_role] < ROLE_RANK[role]:
            raise HTTPException(status_code=403, detail="Insufficient role")

        request.state.role = user_role.value
        return user_role

    return dependency
