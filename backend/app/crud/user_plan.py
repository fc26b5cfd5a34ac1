import logging
from sqlalchemy.orm import Session
from app.models.user_plan import UserPlan, PlanType
from app.services.plan_service import plan_attributes

logger = logging.getLogger(__name__)

def get_by_user_id(db: Session, user_id: str):
    return db.query(UserPlan).filter(UserPlan.user_id == user_id).first()

def get_or_create_plan(db: Session, user_id: str) -> UserPlan:
    """Every user starts on the free plan; the row is created on first read."""
    plan = get_by_user_id(db, user_id)
    if plan:
        return plan

    plan = UserPlan(user_id=user_id, **plan_attributes(PlanType.FREE))
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info(f"Created default free plan for user {user_id}")
    return plan

def apply_plan(db: Session, user_id: str, plan_type: PlanType) -> UserPlan:
    """
    Upserts the user's plan so that subscription_limit and features match plan_type.
    The caller commits.
    """
    plan = get_by_user_id(db, user_id)
    if plan is None:
        plan = UserPlan(user_id=user_id)
        db.add(plan)

    for field, value in plan_attributes(plan_type).items():
        setattr(plan, field, value)
    db.flush()
    return plan
