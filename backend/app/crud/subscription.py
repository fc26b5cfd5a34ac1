from typing import List
from sqlalchemy.orm import Session
from app.models.subscription import Subscription, SubscriptionStatus
from app.schemas.subscription import SubscriptionCreate, SubscriptionUpdate

def get_subscriptions(db: Session, user_id: str) -> List[Subscription]:
    return db.query(Subscription).filter(
        Subscription.user_id == user_id
    ).order_by(Subscription.created_at.desc(), Subscription.id.desc()).all()

def get_subscription(db: Session, user_id: str, subscription_id: int):
    return db.query(Subscription).filter(
        Subscription.id == subscription_id,
        Subscription.user_id == user_id
    ).first()

def get_active_subscriptions(db: Session, user_id: str = None) -> List[Subscription]:
    query = db.query(Subscription).filter(Subscription.status == SubscriptionStatus.ACTIVE.value)
    if user_id:
        query = query.filter(Subscription.user_id == user_id)
    return query.all()

def count_active(db: Session, user_id: str) -> int:
    return db.query(Subscription).filter(
        Subscription.user_id == user_id,
        Subscription.status == SubscriptionStatus.ACTIVE.value
    ).count()

def create(db: Session, obj_in: SubscriptionCreate, user_id: str):
    db_obj = Subscription(
        **obj_in.model_dump(),
        user_id=user_id
    )
    if db_obj.notes is None:
        db_obj.notes = ""
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update(db: Session, db_obj: Subscription, obj_in: SubscriptionUpdate):
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def delete(db: Session, db_obj: Subscription):
    db.delete(db_obj)
    db.commit()
