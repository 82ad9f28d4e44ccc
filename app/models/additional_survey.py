from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text

from app.database import Base
from app.services.dates import utcnow


class AdditionalSurveyResponse(Base):
    __tablename__ = "additional_survey_responses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, unique=True, index=True)

    licensed_beds = Column(Integer, nullable=True)
    # At most one of the two occupied-bed columns is set.
    occupied_beds_count = Column(Integer, nullable=True)
    occupied_beds_percent = Column(Float, nullable=True)
    icu_beds = Column(Integer, nullable=True)

    asp_fte = Column(Float, nullable=True)
    pharmacist_fte = Column(Float, nullable=True)
    physician_fte = Column(Float, nullable=True)
    other1_specify = Column(String, nullable=True)
    other1_fte = Column(Float, nullable=True)
    other2_specify = Column(String, nullable=True)
    other2_fte = Column(Float, nullable=True)
    other3_specify = Column(String, nullable=True)
    other3_fte = Column(Float, nullable=True)

    saar_value = Column(Float, nullable=True)
    saar_category = Column(String, nullable=True)
    effectiveness_options = Column(JSON, nullable=False, default=list)
    effectiveness_other = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
