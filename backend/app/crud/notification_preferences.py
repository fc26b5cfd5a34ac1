"""
Preferences store: one notification_preferences row per user.

Times are stored with seconds ("14:30:00") and handed back truncated to
minutes ("14:30").
"""
import logging
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.notification_preferences import NotificationPreferences
from app.schemas.notification_preferences import NotificationPrefs

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES = NotificationPrefs(
    email_enabled=True,
    reminder_30_days=True,
    reminder_7_days=True,
    reminder_1_day=True,
    email_time="09:00",
)


def to_stored_time(email_time: str) -> str:
    return email_time + ":00"


def to_display_time(stored_time: str) -> str:
    return stored_time[:5]


def get_by_user_id(db: Session, user_id: str):
    return db.query(NotificationPreferences).filter(NotificationPreferences.user_id == user_id).first()


def to_prefs(row: NotificationPreferences) -> NotificationPrefs:
    return NotificationPrefs(
        email_enabled=row.email_enabled,
        reminder_30_days=row.reminder_30_days,
        reminder_7_days=row.reminder_7_days,
        reminder_1_day=row.reminder_1_day,
        email_time=to_display_time(row.email_time),
    )


def load(db: Session, user_id: str) -> NotificationPrefs:
    """
    Returns the user's preferences, inserting the defaults on first access.
    Store failures are rolled back and re-raised.
    """
    try:
        row = get_by_user_id(db, user_id)
        if row:
            return to_prefs(row)

        defaults = DEFAULT_PREFERENCES.model_dump()
        defaults["email_time"] = to_stored_time(defaults["email_time"])
        db.add(NotificationPreferences(user_id=user_id, **defaults))
        db.commit()
        logger.info(f"Created default notification preferences for user {user_id}")
        return DEFAULT_PREFERENCES.model_copy()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to load notification preferences for user {user_id}: {e}")
        raise


def save(db: Session, user_id: str, prefs: NotificationPrefs) -> NotificationPrefs:
    """Full upsert keyed by user_id."""
    try:
        values = prefs.model_dump()
        values["email_time"] = to_stored_time(values["email_time"])

        row = get_by_user_id(db, user_id)
        if row is None:
            row = NotificationPreferences(user_id=user_id)
            db.add(row)
        for field, value in values.items():
            setattr(row, field, value)
        row.updated_at = datetime.utcnow()

        db.commit()
        db.refresh(row)
        return to_prefs(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save notification preferences for user {user_id}: {e}")
        raise


def set_reminder_flags(db: Session, user_id: str, **flags) -> bool:
    """
    Server-side toggle used on plan changes. Only touches an existing row; the
    caller commits. Returns False when the user has no preferences yet.
    """
    row = get_by_user_id(db, user_id)
    if row is None:
        return False
    for field, value in flags.items():
        setattr(row, field, value)
    row.updated_at = datetime.utcnow()
    return True
