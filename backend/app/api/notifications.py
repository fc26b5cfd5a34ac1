from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.auth import get_current_user
from app.models.user import User
from app.models.notification import Notification
from app.crud import notification as crud_notification
from app.crud import notification_preferences as crud_preferences
from app.schemas.notification import NotificationResponse, UnreadCountResponse, NotificationCheckResponse
from app.schemas.notification_preferences import NotificationPrefs
from app.services import notification_service
from typing import List

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _serialize(notifications: List[Notification]) -> List[NotificationResponse]:
    return [
        NotificationResponse.model_validate(n).model_copy(update={"is_urgent": notification_service.is_urgent(n)})
        for n in notifications
    ]


@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    limit: int = Query(crud_notification.FEED_LIMIT, ge=1, le=200),
    display: bool = Query(False, description="Cap to the entries shown in the bell dropdown"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Most recent notifications first.
    """
    if display:
        limit = min(limit, notification_service.DISPLAY_LIMIT)
    return _serialize(crud_notification.get_notifications(db, current_user.id, limit=limit))


@router.get("/unread", response_model=List[NotificationResponse])
def get_unread_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get all unread notifications for the current user.
    """
    return _serialize(crud_notification.get_unread(db, current_user.id))


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = notification_service.get_unread_count(crud_notification.get_notifications(db, current_user.id))
    return {"count": count, "badge": notification_service.badge_label(count)}


@router.get("/urgent", response_model=List[NotificationResponse])
def get_urgent_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    feed = crud_notification.get_notifications(db, current_user.id)
    return _serialize(notification_service.get_urgent_notifications(feed))


@router.post("/check", response_model=NotificationCheckResponse)
def check_for_new_notifications(
    force_refresh: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Derive renewal and overdue notifications from the user's subscriptions.
    The refreshed feed is returned when asked for or when anything was created.
    """
    created = notification_service.check_for_new_notifications(db, current_user.id)
    response = {"created": len(created), "notifications": None}
    if force_refresh or created:
        response["notifications"] = _serialize(crud_notification.get_notifications(db, current_user.id))
    return response


@router.post("/read-all", status_code=status.HTTP_200_OK)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    updated = crud_notification.mark_all_as_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.get("/preferences", response_model=NotificationPrefs)
def get_preferences(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return crud_preferences.load(db, current_user.id)


@router.put("/preferences", response_model=NotificationPrefs)
def save_preferences(
    prefs: NotificationPrefs,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return crud_preferences.save(db, current_user.id, prefs)


@router.post("/{notification_id}/read", status_code=status.HTTP_200_OK)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Mark a notification as read.
    """
    if not crud_notification.mark_as_read(db, current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")

    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", status_code=status.HTTP_200_OK)
def delete_notification(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not crud_notification.delete_notification(db, current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")

    return {"message": "Notification deleted"}
