from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.api.auth import get_current_user
from app.crud import user_plan as crud_user_plan
from app.schemas.user_plan import UserPlanDetails
from app.services.plan_service import plan_limits

router = APIRouter(prefix="/plan", tags=["plan"])


@router.get("", response_model=UserPlanDetails)
def get_my_plan(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    The user's plan with its limits. Plans only change through Paddle webhooks.
    """
    plan = crud_user_plan.get_or_create_plan(db, current_user.id)
    return {"plan": plan, "limits": plan_limits(plan.plan_type)}
