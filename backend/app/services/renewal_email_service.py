from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

import pytz
from sqlalchemy.orm import Session

from app.crud import notification_preferences as crud_preferences
from app.crud import subscription as crud_subscription
from app.crud import user_plan as crud_user_plan
from app.models.email_log import EmailLog
from app.models.subscription import Subscription
from app.models.user_plan import PlanType
from app.schemas.notification_preferences import NotificationPrefs
from app.services.email_service import email_service
from app.utils.utils import format_cost
from config import APP_TZ

logger = logging.getLogger(__name__)

EMAIL_TYPE = "renewal_reminder"


@dataclass
class ReminderEmail:
    user_id: str
    subscription_id: int
    service_name: str
    email: str
    days: int
    subject: str
    html: str


def local_now(tz_name: str = APP_TZ) -> datetime:
    return datetime.now(pytz.timezone(tz_name))


def should_send(plan_type: str, prefs: NotificationPrefs, days: int) -> bool:
    if not prefs.email_enabled:
        return False
    if days < 0:
        return True
    if plan_type == PlanType.FREE.value:
        return prefs.reminder_7_days and 0 <= days <= 7
    return (
        (prefs.reminder_30_days and days == 30)
        or (prefs.reminder_7_days and days == 7)
        or (prefs.reminder_1_day and days == 1)
        or (prefs.reminder_7_days and 2 <= days <= 6)
    )


def is_due(prefs: NotificationPrefs, now: datetime) -> bool:
    """The job runs hourly; a user's e-mails go out in the hour of their email_time."""
    return int(prefs.email_time[:2]) == now.hour


def email_subject(service_name: str, days: int) -> str:
    if days < 0:
        return f"OVERDUE: {service_name} Payment"
    if days == 0:
        return f"TODAY: {service_name} Renews Today"
    if days == 1:
        return f"TOMORROW: {service_name} Renews Tomorrow"
    if days == 7:
        return f"7 Days: {service_name} Renewal Reminder"
    if days == 30:
        return f"30 Days: {service_name} Renewal Notice"
    return f"{days} Days: {service_name} Renewal Reminder"


def email_html(subscription: Subscription, days: int, user_name: str) -> str:
    price = f"${format_cost(subscription.cost)}"
    name = subscription.service_name
    if days < 0:
        body = f"Your {name} payment of {price} is {abs(days)} day(s) overdue."
    elif days == 0:
        body = f"{name} renews today for {price}. Check your payment method."
    elif days == 1:
        body = f"{name} renews tomorrow for {price}. This is your last chance to cancel."
    else:
        body = f"{name} renews in {days} days ({subscription.next_renewal.isoformat()}) for {price}."
    return (
        "<html><body>"
        f"<p>Hi {user_name or 'there'},</p>"
        f"<p>{body}</p>"
        "<p>Manage your subscriptions in SubTracker.</p>"
        "</body></html>"
    )


def already_sent_today(db: Session, subscription_id: int, now: datetime) -> bool:
    # sent_at is stored as naive UTC
    start_local = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start = start_local.astimezone(pytz.utc).replace(tzinfo=None)
    end = start + timedelta(days=1)
    return db.query(EmailLog).filter(
        EmailLog.subscription_id == subscription_id,
        EmailLog.email_type == EMAIL_TYPE,
        EmailLog.sent_at >= start,
        EmailLog.sent_at < end
    ).first() is not None


def collect_reminder_emails(
    db: Session,
    now: datetime,
    force: bool = False,
    user_id: Optional[str] = None,
    skip_duplicates: bool = True,
) -> List[ReminderEmail]:
    """Decides which renewal e-mails are due right now. force bypasses preference, day, hour and duplicate checks."""
    emails = []
    for sub in crud_subscription.get_active_subscriptions(db, user_id):
        try:
            days = (sub.next_renewal - now.date()).days

            plan = crud_user_plan.get_by_user_id(db, sub.user_id)
            plan_type = plan.plan_type if plan else PlanType.FREE.value

            row = crud_preferences.get_by_user_id(db, sub.user_id)
            prefs = crud_preferences.to_prefs(row) if row else crud_preferences.DEFAULT_PREFERENCES

            if not force:
                # Users who never opened their preferences have not opted in
                if row is None:
                    continue
                if not is_due(prefs, now) or not should_send(plan_type, prefs, days):
                    continue
            if not sub.user or not sub.user.email:
                continue
            if skip_duplicates and not force and already_sent_today(db, sub.id, now):
                continue

            emails.append(ReminderEmail(
                user_id=sub.user_id,
                subscription_id=sub.id,
                service_name=sub.service_name,
                email=sub.user.email,
                days=days,
                subject=email_subject(sub.service_name, days),
                html=email_html(sub, days, sub.user.full_name),
            ))
        except Exception as e:
            logger.error(f"[RenewalEmails] Error processing subscription {sub.service_name}: {e}")
            continue
    return emails


def send_renewal_emails(
    db: Session,
    now: Optional[datetime] = None,
    force: bool = False,
    test: bool = False,
    user_id: Optional[str] = None,
    sender=None,
) -> Dict[str, Any]:
    """
    Sends (or, in test mode, previews) the renewal e-mails due at `now` and logs
    each one sent to email_logs.
    """
    now = now or local_now()
    sender = sender or email_service
    logger.info(f"[RenewalEmails] {'TEST' if test else 'RUN'} @ {now.isoformat()} force={force} user={user_id or 'ALL'}")

    emails = collect_reminder_emails(db, now, force=force, user_id=user_id, skip_duplicates=not test)
    details = [
        {"subscription": e.service_name, "email": e.email, "days": e.days, "subject": e.subject}
        for e in emails
    ]

    if test:
        return {"success": True, "emailsSent": len(emails), "details": details,
                "message": "TEST MODE - no emails actually sent"}

    sent = 0
    for item in emails:
        if not sender.send(item.email, item.subject, item.html):
            continue
        db.add(EmailLog(
            user_id=item.user_id,
            subscription_id=item.subscription_id,
            email_type=EMAIL_TYPE,
            email_subject=item.subject,
            sent_at=now.astimezone(pytz.utc).replace(tzinfo=None),
        ))
        db.commit()
        sent += 1

    logger.info(f"[RenewalEmails] Sent {sent} emails")
    return {"success": True, "emailsSent": sent, "details": details, "message": f"Sent {sent} emails"}
