from typing import Dict, Any
from app.models.user_plan import PlanType, UserPlan

UNLIMITED = -1
UNLIMITED_SUBSCRIPTION_LIMIT = 999999

PLAN_LIMITS: Dict[PlanType, Dict[str, Any]] = {
    PlanType.FREE: {
        "subscriptions": 5,
        "analytics": False,
        "reports": False,
        "team_features": False,
        "api_access": False,
        "reminders": 3,
        "export_data": False,
    },
    PlanType.PRO: {
        "subscriptions": UNLIMITED,
        "analytics": True,
        "reports": True,
        "team_features": False,
        "api_access": False,
        "reminders": UNLIMITED,
        "export_data": True,
    },
}

FEATURE_FLAGS = ("analytics", "reports", "team_features", "api_access")


def plan_limits(plan_type: str) -> Dict[str, Any]:
    return dict(PLAN_LIMITS[PlanType(plan_type)])


def plan_attributes(plan_type: PlanType) -> Dict[str, Any]:
    """Column values a user_plans row must carry for the given tier."""
    limits = PLAN_LIMITS[plan_type]
    subscription_limit = limits["subscriptions"]
    if subscription_limit == UNLIMITED:
        subscription_limit = UNLIMITED_SUBSCRIPTION_LIMIT
    return {
        "plan_type": plan_type.value,
        "subscription_limit": subscription_limit,
        "features": {flag: limits[flag] for flag in FEATURE_FLAGS},
    }


def check_feature_access(plan: UserPlan, feature: str) -> bool:
    if plan is None:
        return False
    value = PLAN_LIMITS[PlanType(plan.plan_type)].get(feature)
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return value == UNLIMITED or value > 0


def check_subscription_limit(plan: UserPlan, active_count: int) -> bool:
    """True when the user may add one more active subscription."""
    if plan is None:
        return False
    limit = PLAN_LIMITS[PlanType(plan.plan_type)]["subscriptions"]
    return limit == UNLIMITED or active_count < limit
