from pydantic import BaseModel
from typing import Dict
from datetime import datetime


class PlanLimits(BaseModel):
    subscriptions: int  # -1 = unlimited
    analytics: bool
    reports: bool
    team_features: bool
    api_access: bool
    reminders: int
    export_data: bool


class UserPlanResponse(BaseModel):
    user_id: str
    plan_type: str
    subscription_limit: int
    features: Dict[str, bool]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserPlanDetails(BaseModel):
    plan: UserPlanResponse
    limits: PlanLimits
