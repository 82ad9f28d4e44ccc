from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.profile import EXPERIENCE_LEVELS, InstitutionResponse, ProfileCompletion, ProfileResponse, ProfileUpdate
from app.services import profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        profile = profile_service.get_profile(user_id=user_id, db=db)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    finally:
        db.close()


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        profile = profile_service.update_profile(user_id=user_id, data=payload, db=db)
        db.commit()
        db.refresh(profile)
        return profile
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.get("/completion", response_model=ProfileCompletion)
def completion(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return profile_service.check_completion(profile_service.get_profile(user_id=user_id, db=db))
    finally:
        db.close()


@router.get("/institutions", response_model=List[InstitutionResponse])
def institutions(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return profile_service.list_institutions(db=db)
    finally:
        db.close()


@router.get("/experience_levels")
def experience_levels():
    return list(EXPERIENCE_LEVELS)
