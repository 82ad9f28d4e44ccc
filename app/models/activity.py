from enum import Enum


class Activity(str, Enum):
    """Closed stewardship-activity taxonomy.

    Member names are the short codes older clients send; values are the
    descriptive labels that get persisted. Storage and validation share
    this one enumeration.
    """

    PAF = "Patient Care - Prospective Audit & Feedback"
    AUTH_RESTRICTED_ANTIMICROBIALS = "Patient Care - Authorization of Restricted Antimicrobials"
    CLINICAL_ROUNDS = "Patient Care - Participating in Clinical Rounds"
    GUIDELINES_EHR = "Administrative - Guidelines/EHR"
    AMU = "Tracking - AMU"
    AMR = "Tracking - AMR"
    ANTIBIOTIC_APPROPRIATENESS = "Tracking - Antibiotic Appropriateness"
    INTERVENTION_ACCEPTANCE = "Tracking - Intervention Acceptance"
    SHARING_DATA = "Reporting - sharing data with prescribers/decision makers"
    PROVIDING_EDUCATION = "Education - Providing Education"
    RECEIVING_EDUCATION = "Education - Receiving Education (e.g. CE)"
    COMMITTEE_WORK = "Administrative - Committee Work"
    QI_PROJECTS_RESEARCH = "Administrative - QI projects/research"
    EMAILS = "Administrative - Emails"
    OTHER = "Other - specify in comments"

    @classmethod
    def parse(cls, value) -> "Activity":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise ValueError(f"Unknown activity: {value!r}") from None

    @classmethod
    def _missing_(cls, value):
        # Lets pydantic and SQLAlchemy accept legacy short codes too.
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None

    @property
    def category(self) -> str:
        return self.value.split(" - ", 1)[0]

    @property
    def is_patient_care(self) -> bool:
        return self in PATIENT_CARE_ACTIVITIES


PATIENT_CARE_ACTIVITIES = frozenset(
    {
        Activity.PAF,
        Activity.AUTH_RESTRICTED_ANTIMICROBIALS,
        Activity.CLINICAL_ROUNDS,
    }
)

QUICK_LOG_PRESETS = [
    {"label": "PAF 15m", "task": Activity.PAF, "minutes": 15},
    {"label": "PAF 30m", "task": Activity.PAF, "minutes": 30},
    {"label": "Auth Restricted 15m", "task": Activity.AUTH_RESTRICTED_ANTIMICROBIALS, "minutes": 15},
    {"label": "Clinical Rounds 30m", "task": Activity.CLINICAL_ROUNDS, "minutes": 30},
    {"label": "Providing Education 60m", "task": Activity.PROVIDING_EDUCATION, "minutes": 60},
]

MINUTES_PRESETS = [15, 30, 60]
