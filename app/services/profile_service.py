import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.profile import Institution, Profile
from app.schemas.profile import OTHER_INSTITUTION, OTHER_TITLE, ProfileUpdate
from app.services.dates import utcnow

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = ("name", "email", "title", "experience_level", "institution_id")


def get_profile(*, user_id: str, db: Session) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == str(user_id)).first()


def ensure_profile(
    *,
    user_id: str,
    db: Session,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> Profile:
    """Create the profile row on first sign-in; fill blanks on later ones."""
    profile = get_profile(user_id=user_id, db=db)
    if profile is None:
        profile = Profile(id=str(user_id), email=email, name=name, role="user", is_active=True, created_at=utcnow())
        db.add(profile)
        db.flush()
        logger.info("Profile created", extra={"user_id": str(user_id)})
        return profile

    if email and not profile.email:
        profile.email = email
    if name and not profile.name:
        profile.name = name
    db.flush()
    return profile


def _institution_id(db: Session, name: str) -> Optional[int]:
    row = db.query(Institution).filter(Institution.name == name).first()
    return None if row is None else row.id


def update_profile(*, user_id: str, data: ProfileUpdate, db: Session) -> Profile:
    profile = ensure_profile(user_id=user_id, db=db)

    title = data.title_other if data.title == OTHER_TITLE and data.title_other else data.title

    if data.institution == OTHER_INSTITUTION and data.institution_other:
        institution = data.institution_other
        notes = None
    else:
        institution = data.institution
        notes = data.institution_other

    profile.name = data.name
    profile.email = data.email
    profile.title = title
    profile.experience_level = data.experience_level
    profile.institution = institution
    profile.notes = notes

    # "Other" resolves to the shared "Other" institution row.
    institution_id = _institution_id(db, data.institution)
    if institution_id is not None:
        profile.institution_id = institution_id

    profile.updated_at = utcnow()
    db.flush()

    logger.info("Profile updated", extra={"user_id": str(user_id)})
    return profile


def check_completion(profile: Optional[Profile]) -> Dict[str, object]:
    if profile is None:
        return {"is_complete": False, "missing_fields": list(REQUIRED_PROFILE_FIELDS)}

    missing = []
    for field in REQUIRED_PROFILE_FIELDS:
        value = getattr(profile, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return {"is_complete": not missing, "missing_fields": missing}


def list_institutions(*, db: Session) -> List[Institution]:
    return db.query(Institution).order_by(Institution.name.asc()).all()
