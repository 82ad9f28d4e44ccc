from app.models.additional_survey import AdditionalSurveyResponse
from app.models.burnout_survey import BurnoutSurveyResponse
from app.models.profile import Institution, Profile
from app.models.time_entry import TimeEntry

__all__ = [
    "AdditionalSurveyResponse",
    "BurnoutSurveyResponse",
    "Institution",
    "Profile",
    "TimeEntry",
]
