from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.burnout_scoring import MAX_RESPONSE, MIN_RESPONSE, QUESTION_COUNT

SAAR_CATEGORIES = (
    "much_lower",
    "slightly_lower",
    "about_predicted",
    "slightly_higher",
    "much_higher",
    "dont_know",
    "not_available",
)

EFFECTIVENESS_OPTIONS = (
    "cost_savings",
    "decreased_utilization",
    "decreased_cdiff",
    "decreased_resistance",
    "other",
    "none",
)

SaarCategory = Literal[
    "much_lower",
    "slightly_lower",
    "about_predicted",
    "slightly_higher",
    "much_higher",
    "dont_know",
    "not_available",
]
EffectivenessOption = Literal[
    "cost_savings",
    "decreased_utilization",
    "decreased_cdiff",
    "decreased_resistance",
    "other",
    "none",
]


# ---------- Burnout ----------

class BurnoutAnswer(BaseModel):
    question_number: int = Field(ge=1, le=QUESTION_COUNT)
    response_value: int = Field(ge=MIN_RESPONSE, le=MAX_RESPONSE)


class BurnoutSubmission(BaseModel):
    responses: List[BurnoutAnswer]

    @model_validator(mode="after")
    def _all_questions_once(self):
        numbers = sorted(r.question_number for r in self.responses)
        if numbers != list(range(1, QUESTION_COUNT + 1)):
            raise ValueError(f"Please answer all {QUESTION_COUNT} questions")
        return self


class BurnoutScoreRequest(BaseModel):
    # Partial sets are allowed here; they simply do not score.
    responses: List[BurnoutAnswer]


class BurnoutScoresResponse(BaseModel):
    exhaustion_score: int
    disengagement_score: int
    exhaustion_average: float
    disengagement_average: float
    total_average: float
    exhaustion_level: str
    disengagement_level: str
    total_level: str


class BurnoutSurveyResult(BaseModel):
    responses: List[BurnoutAnswer]
    completed_at: Optional[datetime]
    scores: Optional[BurnoutScoresResponse]


# ---------- Additional survey ----------

class ExactOccupiedBeds(BaseModel):
    mode: Literal["exact"] = "exact"
    value: int = Field(ge=0)


class PercentOccupiedBeds(BaseModel):
    mode: Literal["percent"] = "percent"
    value: float = Field(ge=0, le=100)


OccupiedBeds = Annotated[Union[ExactOccupiedBeds, PercentOccupiedBeds], Field(discriminator="mode")]


class AdditionalSurveyData(BaseModel):
    licensed_beds: Optional[int] = Field(default=None, ge=0)
    occupied_beds: Optional[OccupiedBeds] = None
    icu_beds: Optional[int] = Field(default=None, ge=0)

    asp_fte: Optional[float] = Field(default=None, ge=0)
    pharmacist_fte: Optional[float] = Field(default=None, ge=0)
    physician_fte: Optional[float] = Field(default=None, ge=0)
    other1_specify: Optional[str] = None
    other1_fte: Optional[float] = Field(default=None, ge=0)
    other2_specify: Optional[str] = None
    other2_fte: Optional[float] = Field(default=None, ge=0)
    other3_specify: Optional[str] = None
    other3_fte: Optional[float] = Field(default=None, ge=0)

    saar_value: Optional[float] = Field(default=None, ge=0)
    saar_category: Optional[SaarCategory] = None
    effectiveness_options: List[EffectivenessOption] = Field(default_factory=list)
    effectiveness_other: Optional[str] = None

    @field_validator(
        "other1_specify",
        "other2_specify",
        "other3_specify",
        "effectiveness_other",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("saar_category", mode="before")
    @classmethod
    def _empty_category(cls, value):
        return value or None

    @model_validator(mode="after")
    def _normalize(self):
        # A concrete SAAR value supersedes the category answer.
        if self.saar_value is not None:
            self.saar_category = None
        self.effectiveness_options = list(dict.fromkeys(self.effectiveness_options))
        if "other" not in self.effectiveness_options:
            self.effectiveness_other = None
        return self
