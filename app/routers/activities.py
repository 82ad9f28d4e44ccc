from fastapi import APIRouter

from app.models.activity import MINUTES_PRESETS, PATIENT_CARE_ACTIVITIES, QUICK_LOG_PRESETS, Activity

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("")
def list_activities():
    return {
        "activities": [
            {
                "code": activity.name,
                "label": activity.value,
                "category": activity.category,
                "is_patient_care": activity in PATIENT_CARE_ACTIVITIES,
            }
            for activity in Activity
        ],
        "quick_log_presets": [
            {"label": preset["label"], "task": preset["task"].value, "minutes": preset["minutes"]}
            for preset in QUICK_LOG_PRESETS
        ],
        "minutes_presets": list(MINUTES_PRESETS),
    }
