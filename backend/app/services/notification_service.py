from sqlalchemy.orm import Session
from datetime import date
from typing import Iterable, List, Optional, Tuple
from app.models.notification import Notification, NotificationType
from app.models.user_plan import PlanType
from app.crud import notification as crud_notification
from app.crud import subscription as crud_subscription
from app.crud import user_plan as crud_user_plan
from app.utils.utils import format_cost
import logging

logger = logging.getLogger(__name__)

# Substrings in a renewal reminder's text that mark it urgent. Case-sensitive.
URGENT_MARKERS = ("1 day", "2 day", "TOMORROW", "TODAY")

# The bell dropdown shows at most this many entries
DISPLAY_LIMIT = 10
BADGE_CAP = 9


def is_urgent(notification: Notification) -> bool:
    if notification.type == NotificationType.OVERDUE_PAYMENT.value:
        return True
    if notification.type == NotificationType.RENEWAL_REMINDER.value:
        return any(marker in notification.message for marker in URGENT_MARKERS)
    return False


def get_unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.is_read)


def badge_label(count: int) -> str:
    return f"{BADGE_CAP}+" if count > BADGE_CAP else str(count)


def get_urgent_notifications(notifications: Iterable[Notification]) -> List[Notification]:
    """Unread notifications flagged urgent, in feed order."""
    return [n for n in notifications if not n.is_read and is_urgent(n)]


# --- Renewal check ---

def days_until(next_renewal: date, today: date) -> int:
    return (next_renewal - today).days


def should_notify(plan_type: str, days: int) -> bool:
    if days < 0:
        return True  # overdue, every plan
    if plan_type == PlanType.FREE.value:
        return 0 <= days <= 7
    return days in (30, 7, 1, 0) or 1 <= days <= 7


def build_renewal_message(service_name: str, cost, days: int) -> Tuple[NotificationType, str, str]:
    price = f"${format_cost(cost)}"

    if days < 0:
        overdue = abs(days)
        plural = "s" if overdue != 1 else ""
        return (
            NotificationType.OVERDUE_PAYMENT,
            f"OVERDUE: {service_name}",
            f"{service_name} payment is {overdue} day{plural} overdue! ({price})",
        )
    if days == 0:
        title = f"Renewal Today: {service_name}"
        message = f"{service_name} renews TODAY for {price}. Check your payment method."
    elif days == 1:
        title = f"Final Notice: {service_name}"
        message = f"{service_name} renews TOMORROW for {price}. Last chance to cancel!"
    elif days == 7:
        title = f"Renewal Reminder: {service_name}"
        message = f"{service_name} will renew in 7 days for {price}. Review if needed."
    elif days == 30:
        title = f"30-Day Renewal Notice: {service_name}"
        message = f"{service_name} will renew in 30 days for {price}. Plan ahead!"
    else:
        title = f"Renewal Reminder: {service_name}"
        message = f"{service_name} will renew in {days} days for {price}."
    return NotificationType.RENEWAL_REMINDER, title, message


def already_notified(existing: Iterable[Notification], type: NotificationType, days: int) -> bool:
    for notification in existing:
        if type == NotificationType.OVERDUE_PAYMENT:
            if f"{abs(days)} day" in notification.message:
                return True
        elif (f"{days} day" in notification.message
              or (days == 0 and "TODAY" in notification.message)
              or (days == 1 and "TOMORROW" in notification.message)):
            return True
    return False


def check_for_new_notifications(db: Session, user_id: str, today: Optional[date] = None) -> List[Notification]:
    """
    Derives renewal/overdue notifications from the user's active subscriptions.
    One notification per subscription and day count; returns the ones created.
    """
    today = today or date.today()
    plan = crud_user_plan.get_or_create_plan(db, user_id)
    subscriptions = crud_subscription.get_active_subscriptions(db, user_id)

    if not subscriptions:
        logger.info(f"No active subscriptions for user {user_id}")
        return []

    created = []
    for sub in subscriptions:
        days = days_until(sub.next_renewal, today)
        if not should_notify(plan.plan_type, days):
            continue

        type, title, message = build_renewal_message(sub.service_name, sub.cost, days)
        existing = crud_notification.get_for_subscription(db, user_id, sub.id, type.value)
        if already_notified(existing, type, days):
            logger.debug(f"Notification already exists for {sub.service_name} ({days} days)")
            continue

        created.append(crud_notification.create_notification(
            db, user_id, type, title, message, subscription_id=sub.id, commit=False
        ))

    if created:
        db.commit()
        for notification in created:
            db.refresh(notification)
    logger.info(f"Renewal check for user {user_id}: {len(created)} notification(s) created")
    return created
