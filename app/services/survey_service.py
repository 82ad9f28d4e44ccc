from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.additional_survey import AdditionalSurveyResponse
from app.models.burnout_survey import BurnoutSurveyResponse
from app.schemas.survey import AdditionalSurveyData
from app.services.burnout_scoring import score_burnout
from app.services.dates import utcnow

logger = logging.getLogger(__name__)


def get_burnout_survey(*, user_id: str, db: Session) -> Dict[str, Any]:
    rows = (
        db.query(BurnoutSurveyResponse)
        .filter(BurnoutSurveyResponse.user_id == str(user_id))
        .order_by(BurnoutSurveyResponse.question_number.asc())
        .all()
    )
    responses = [
        {"question_number": r.question_number, "response_value": r.response_value}
        for r in rows
    ]
    completed_at = max((r.completed_at for r in rows), default=None)
    scores = score_burnout(responses)
    return {
        "responses": responses,
        "completed_at": completed_at,
        "scores": None if scores is None else asdict(scores),
    }


def save_burnout_survey(*, user_id: str, answers, db: Session) -> None:
    """Upsert one row per question, all sharing one completion time.

    Caller owns the transaction.
    """
    completed_at = utcnow()
    existing = {
        r.question_number: r
        for r in db.query(BurnoutSurveyResponse)
        .filter(BurnoutSurveyResponse.user_id == str(user_id))
        .all()
    }

    for answer in answers:
        row = existing.get(answer.question_number)
        if row is None:
            row = BurnoutSurveyResponse(user_id=str(user_id), question_number=answer.question_number)
            db.add(row)
        row.response_value = answer.response_value
        row.completed_at = completed_at

    db.flush()
    logger.info("Burnout survey saved", extra={"user_id": str(user_id)})


def _to_additional_data(row: AdditionalSurveyResponse) -> AdditionalSurveyData:
    occupied = None
    if row.occupied_beds_percent is not None:
        occupied = {"mode": "percent", "value": row.occupied_beds_percent}
    elif row.occupied_beds_count is not None:
        occupied = {"mode": "exact", "value": row.occupied_beds_count}

    return AdditionalSurveyData(
        licensed_beds=row.licensed_beds,
        occupied_beds=occupied,
        icu_beds=row.icu_beds,
        asp_fte=row.asp_fte,
        pharmacist_fte=row.pharmacist_fte,
        physician_fte=row.physician_fte,
        other1_specify=row.other1_specify,
        other1_fte=row.other1_fte,
        other2_specify=row.other2_specify,
        other2_fte=row.other2_fte,
        other3_specify=row.other3_specify,
        other3_fte=row.other3_fte,
        saar_value=row.saar_value,
        saar_category=row.saar_category,
        effectiveness_options=list(row.effectiveness_options or []),
        effectiveness_other=row.effectiveness_other,
    )


def get_additional_survey(*, user_id: str, db: Session) -> Optional[AdditionalSurveyData]:
    row = (
        db.query(AdditionalSurveyResponse)
        .filter(AdditionalSurveyResponse.user_id == str(user_id))
        .first()
    )
    if row is None:
        return None
    return _to_additional_data(row)


def save_additional_survey(*, user_id: str, data: AdditionalSurveyData, db: Session) -> AdditionalSurveyData:
    row = (
        db.query(AdditionalSurveyResponse)
        .filter(AdditionalSurveyResponse.user_id == str(user_id))
        .first()
    )
    if row is None:
        row = AdditionalSurveyResponse(user_id=str(user_id), created_at=utcnow())
        db.add(row)

    fields = data.model_dump(exclude={"occupied_beds"})
    for name, value in fields.items():
        setattr(row, name, value)

    occupied = data.occupied_beds
    row.occupied_beds_count = occupied.value if occupied is not None and occupied.mode == "exact" else None
    row.occupied_beds_percent = occupied.value if occupied is not None and occupied.mode == "percent" else None
    row.updated_at = utcnow()

    db.flush()
    logger.info("Additional survey saved", extra={"user_id": str(user_id)})
    return _to_additional_data(row)
