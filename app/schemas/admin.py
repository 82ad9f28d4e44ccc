from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

RoleName = Literal["user", "admin", "super_admin"]


class RecentActivity(BaseModel):
    id: str
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    task: str
    minutes: int
    occurred_on: str
    created_at: datetime


class ActivityStats(BaseModel):
    total_entries: int
    total_minutes: int
    unique_users: int
    activity_breakdown: Dict[str, int]
    category_breakdown: Dict[str, int]
    recent_activity: List[RecentActivity]


class AdminUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime


class UserListResponse(BaseModel):
    users: List[AdminUser]
    counts: Dict[str, int]


class RoleUpdate(BaseModel):
    role: RoleName


class StatusUpdate(BaseModel):
    is_active: bool
