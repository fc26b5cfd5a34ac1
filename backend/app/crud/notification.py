from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.notification import Notification, NotificationType

FEED_LIMIT = 50


def get_notifications(db: Session, user_id: str, limit: int = FEED_LIMIT) -> List[Notification]:
    return db.query(Notification).filter(
        Notification.user_id == user_id
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def get_unread(db: Session, user_id: str) -> List[Notification]:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def get_for_subscription(db: Session, user_id: str, subscription_id: int, type: str) -> List[Notification]:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.subscription_id == subscription_id,
        Notification.type == type
    ).all()


def create_notification(
    db: Session,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    subscription_id: Optional[int] = None,
    commit: bool = True,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=NotificationType(type).value,
        title=title,
        message=message,
        subscription_id=subscription_id,
        is_read=False,
    )
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    return notification


def mark_as_read(db: Session, user_id: str, notification_id: int) -> bool:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        return False

    notification.is_read = True
    db.commit()
    return True


def mark_all_as_read(db: Session, user_id: str) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return updated


def delete_notification(db: Session, user_id: str, notification_id: int) -> bool:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        return False

    db.delete(notification)
    db.commit()
    return True
