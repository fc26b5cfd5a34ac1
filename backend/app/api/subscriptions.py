from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from app.database import get_db
from app.models.user import User
from app.models.notification import NotificationType
from app.models.subscription import SubscriptionStatus
from app.schemas.subscription import SubscriptionCreate, SubscriptionUpdate, SubscriptionResponse
from app.crud import subscription as crud_subscription
from app.crud import user_plan as crud_user_plan
from app.crud import notification as crud_notification
from app.services import notification_service
from app.services.plan_service import check_subscription_limit
from app.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/subscriptions",
    tags=["subscriptions"]
)

LIMIT_TITLE = "Subscription Limit Reached"
LIMIT_MESSAGE = "You have reached your subscription limit. Upgrade to Pro for unlimited subscriptions."


def _refresh_notifications(db: Session, user_id: str):
    # A failed check must not undo the subscription change that triggered it
    try:
        notification_service.check_for_new_notifications(db, user_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Renewal check failed for user {user_id}: {e}")


@router.get("", response_model=List[SubscriptionResponse])
def list_subscriptions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud_subscription.get_subscriptions(db, current_user.id)


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def add_subscription(
    subscription_in: SubscriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    plan = crud_user_plan.get_or_create_plan(db, current_user.id)
    active_count = crud_subscription.count_active(db, current_user.id)
    if not check_subscription_limit(plan, active_count):
        crud_notification.create_notification(
            db, current_user.id, NotificationType.PLAN_LIMIT, LIMIT_TITLE, LIMIT_MESSAGE
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Subscription limit reached. Please upgrade your plan."
        )

    subscription = crud_subscription.create(db, obj_in=subscription_in, user_id=current_user.id)
    _refresh_notifications(db, current_user.id)
    db.refresh(subscription)
    return subscription


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(
    subscription_id: int,
    subscription_in: SubscriptionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    subscription = crud_subscription.get_subscription(db, current_user.id, subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")

    subscription = crud_subscription.update(db, db_obj=subscription, obj_in=subscription_in)
    _refresh_notifications(db, current_user.id)
    db.refresh(subscription)
    return subscription


@router.post("/{subscription_id}/toggle", response_model=SubscriptionResponse)
def toggle_subscription_status(
    subscription_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    subscription = crud_subscription.get_subscription(db, current_user.id, subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")

    if subscription.status == SubscriptionStatus.ACTIVE.value:
        new_status = SubscriptionStatus.CANCELLED
    else:
        new_status = SubscriptionStatus.ACTIVE
    return crud_subscription.update(db, db_obj=subscription, obj_in=SubscriptionUpdate(status=new_status))


@router.delete("/{subscription_id}")
def delete_subscription(
    subscription_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    subscription = crud_subscription.get_subscription(db, current_user.id, subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")

    crud_subscription.delete(db, subscription)
    return {"message": "Subscription deleted successfully"}
