from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OTHER_TITLE = "Other, please specify"
OTHER_INSTITUTION = "Other"

EXPERIENCE_LEVELS = [
    "0-1 years",
    "2-5 years",
    "6-10 years",
    "11-15 years",
    "16-20 years",
    "20+ years",
]


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    title: str = Field(min_length=1)
    title_other: Optional[str] = None
    experience_level: str = Field(min_length=1)
    institution: str = Field(min_length=1)
    institution_other: Optional[str] = None

    @field_validator("name", "email", "title", "experience_level", "institution", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("title_other", "institution_other", mode="before")
    @classmethod
    def _strip_optional(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    experience_level: Optional[str] = None
    institution: Optional[str] = None
    institution_id: Optional[int] = None
    notes: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProfileCompletion(BaseModel):
    is_complete: bool
    missing_fields: List[str]


class InstitutionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
