from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends

from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.survey import (
    AdditionalSurveyData,
    BurnoutScoreRequest,
    BurnoutScoresResponse,
    BurnoutSubmission,
    BurnoutSurveyResult,
)
from app.services import survey_service
from app.services.burnout_scoring import OLBI_QUESTIONS, RESPONSE_OPTIONS, score_burnout

router = APIRouter(prefix="/surveys", tags=["Surveys"])


@router.get("/burnout/questions")
def burnout_questions():
    return {
        "questions": [{"question_number": i, "text": text} for i, text in enumerate(OLBI_QUESTIONS, start=1)],
        "response_options": [{"value": value, "label": label} for value, label in RESPONSE_OPTIONS.items()],
    }


@router.get("/burnout", response_model=BurnoutSurveyResult)
def get_burnout(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return survey_service.get_burnout_survey(user_id=user_id, db=db)
    finally:
        db.close()


@router.put("/burnout", response_model=BurnoutSurveyResult)
def save_burnout(
    payload: BurnoutSubmission,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        survey_service.save_burnout_survey(user_id=user_id, answers=payload.responses, db=db)
        db.commit()
        return survey_service.get_burnout_survey(user_id=user_id, db=db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.post("/burnout/score", response_model=Optional[BurnoutScoresResponse])
def score(payload: BurnoutScoreRequest, _user_id: str = Depends(require_auth)):
    scores = score_burnout(payload.responses)
    return None if scores is None else asdict(scores)


@router.get("/additional", response_model=Optional[AdditionalSurveyData])
def get_additional(user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return survey_service.get_additional_survey(user_id=user_id, db=db)
    finally:
        db.close()


@router.put("/additional", response_model=AdditionalSurveyData)
def save_additional(
    payload: AdditionalSurveyData,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        saved = survey_service.save_additional_survey(user_id=user_id, data=payload, db=db)
        db.commit()
        return saved
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
