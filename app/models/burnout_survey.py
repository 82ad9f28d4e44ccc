from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint

from app.database import Base


class BurnoutSurveyResponse(Base):
    __tablename__ = "burnout_survey_responses"
    __table_args__ = (
        UniqueConstraint("user_id", "question_number", name="uq_burnout_user_question"),
        CheckConstraint("question_number >= 1 AND question_number <= 12", name="ck_burnout_question_number"),
        CheckConstraint("response_value >= 1 AND response_value <= 4", name="ck_burnout_response_value"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    question_number = Column(Integer, nullable=False)
    response_value = Column(Integer, nullable=False)
    completed_at = Column(DateTime, nullable=False)
