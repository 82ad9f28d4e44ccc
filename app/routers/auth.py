from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

import os
from app.database import SessionLocal
from app.services.auth_service import create_access_token
from app.services.profile_service import ensure_profile

router = APIRouter(prefix="/auth", tags=["auth"])


class TokenRequest(BaseModel):
    user_id: str = Field(min_length=1)
    email: Optional[str] = None
    name: Optional[str] = None


@router.post("/token")
def issue_token(payload: TokenRequest):
    env = os.getenv("ENV", "dev").lower()
    if env not in {"dev", "local", "test"}:
        raise HTTPException(status_code=404, detail="Not Found")
    try:
        token = create_access_token(user_id=str(payload.user_id), email=payload.email)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    db = SessionLocal()
    try:
        ensure_profile(user_id=payload.user_id, email=payload.email, name=payload.name, db=db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    return {
        "access_token": token,
        "token_type": "bearer",
    }
