"""
Plan state transitions driven by Paddle webhook events.

Every event is handled at least once and possibly more: nothing here
deduplicates a replayed delivery.
"""
import enum
import hashlib
import hmac
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.crud import notification as crud_notification
from app.crud import user as crud_user
from app.crud import notification_preferences as crud_preferences
from app.crud import user_plan as crud_user_plan
from app.models.notification import NotificationType
from app.models.paddle_subscription import PaddleSubscription
from app.models.user_plan import PlanType
from app.schemas.paddle import PaddleWebhookEvent

logger = logging.getLogger(__name__)

WELCOME_TITLE = "Welcome to SubTracker Pro!"
WELCOME_MESSAGE = (
    "Your payment was successful and your plan has been upgraded. "
    "Enjoy unlimited subscriptions and advanced features!"
)
CANCELLED_TITLE = "Subscription Cancelled"
CANCELLED_MESSAGE = (
    "Your Pro subscription has been cancelled. "
    "You can resubscribe anytime to regain access to Pro features."
)


class PaddleEventType(str, enum.Enum):
    TRANSACTION_COMPLETED = "transaction.completed"
    SUBSCRIPTION_CREATED = "subscription.created"
    SUBSCRIPTION_UPDATED = "subscription.updated"
    SUBSCRIPTION_CANCELED = "subscription.canceled"


def parse_event_type(raw: Any) -> Optional[PaddleEventType]:
    if not isinstance(raw, str):
        return None
    try:
        return PaddleEventType(raw)
    except ValueError:
        return None


def verify_paddle_signature(raw_body: bytes, signature_header: str, secret: str) -> bool:
    """
    Checks a `Paddle-Signature: ts=...;h1=...` header against HMAC-SHA256 of "{ts}:{body}".
    """
    parts = {}
    for item in signature_header.split(";"):
        key, sep, value = item.strip().partition("=")
        if sep:
            parts.setdefault(key, []).append(value)

    timestamps = parts.get("ts")
    signatures = parts.get("h1")
    if not timestamps or not signatures:
        return False

    signed_payload = timestamps[0].encode() + b":" + raw_body
    expected = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)


def _resolve_plan_type(raw: Optional[str]) -> PlanType:
    try:
        return PlanType(raw or PlanType.PRO.value)
    except ValueError:
        raise ValueError(f"Unsupported plan type: {raw}")


def _find_paddle_subscription(db: Session, paddle_subscription_id: Optional[str]):
    if not paddle_subscription_id:
        return None
    return db.query(PaddleSubscription).filter(
        PaddleSubscription.paddle_subscription_id == paddle_subscription_id
    ).first()


def _known_user(db: Session, user_id: str) -> bool:
    if crud_user.get_user(db, user_id) is not None:
        return True
    logger.warning(f"[PaddleWebhook] No account for user {user_id}, event skipped")
    return False


# --- Handlers ---

def handle_transaction_completed(db: Session, event: PaddleWebhookEvent) -> None:
    logger.info(f"[PaddleWebhook] Processing completed transaction: {event.data.id}")
    user_id = event.user_id
    if not user_id:
        logger.error("[PaddleWebhook] No user ID in transaction custom data")
        return
    if not _known_user(db, user_id):
        return

    plan_type = _resolve_plan_type(event.plan_type)
    crud_user_plan.apply_plan(db, user_id, plan_type)

    if plan_type == PlanType.PRO:
        if not crud_preferences.set_reminder_flags(db, user_id, reminder_30_days=True, reminder_1_day=True):
            logger.info(f"[PaddleWebhook] No notification preferences yet for user {user_id}")

    crud_notification.create_notification(
        db, user_id, NotificationType.SYSTEM, WELCOME_TITLE, WELCOME_MESSAGE, commit=False
    )
    db.commit()
    logger.info(f"[PaddleWebhook] Transaction processed for user {user_id} (plan: {plan_type.value})")


def handle_subscription_created(db: Session, event: PaddleWebhookEvent) -> None:
    logger.info(f"[PaddleWebhook] Processing subscription creation: {event.data.id}")
    user_id = event.user_id
    if not user_id:
        logger.error("[PaddleWebhook] No user ID in subscription custom data")
        return
    if not _known_user(db, user_id):
        return

    if not event.data.id:
        logger.warning(f"[PaddleWebhook] Subscription event without id for user {user_id}")
        return

    mirror = _find_paddle_subscription(db, event.data.id)
    if mirror is None:
        mirror = PaddleSubscription(user_id=user_id, paddle_subscription_id=event.data.id)
        db.add(mirror)
    mirror.status = event.data.status
    db.commit()
    logger.info(f"[PaddleWebhook] Subscription {event.data.id} recorded for user {user_id}")


def handle_subscription_updated(db: Session, event: PaddleWebhookEvent) -> None:
    logger.info(f"[PaddleWebhook] Processing subscription update: {event.data.id}")
    mirror = _find_paddle_subscription(db, event.data.id)
    if mirror is None:
        logger.info(f"[PaddleWebhook] Unknown subscription {event.data.id}, nothing to update")
        return

    mirror.status = event.data.status
    mirror.updated_at = datetime.utcnow()
    db.commit()


def handle_subscription_canceled(db: Session, event: PaddleWebhookEvent) -> None:
    logger.info(f"[PaddleWebhook] Processing subscription cancellation: {event.data.id}")
    mirror = _find_paddle_subscription(db, event.data.id)

    user_id = event.user_id or (mirror.user_id if mirror else None)
    if not user_id:
        logger.error(f"[PaddleWebhook] Could not find user for cancelled subscription: {event.data.id}")
        return
    if not _known_user(db, user_id):
        return

    crud_user_plan.apply_plan(db, user_id, PlanType.FREE)
    crud_preferences.set_reminder_flags(db, user_id, reminder_30_days=False, reminder_1_day=False)

    if mirror is not None:
        mirror.status = "canceled"
        mirror.updated_at = datetime.utcnow()

    crud_notification.create_notification(
        db, user_id, NotificationType.SYSTEM, CANCELLED_TITLE, CANCELLED_MESSAGE, commit=False
    )
    db.commit()
    logger.info(f"[PaddleWebhook] Subscription cancelled for user {user_id}")


EVENT_HANDLERS: Dict[PaddleEventType, Callable[[Session, PaddleWebhookEvent], None]] = {
    PaddleEventType.TRANSACTION_COMPLETED: handle_transaction_completed,
    PaddleEventType.SUBSCRIPTION_CREATED: handle_subscription_created,
    PaddleEventType.SUBSCRIPTION_UPDATED: handle_subscription_updated,
    PaddleEventType.SUBSCRIPTION_CANCELED: handle_subscription_canceled,
}


def process_event(db: Session, payload: Any) -> Optional[PaddleEventType]:
    """
    Dispatches one decoded webhook body. Unknown event types and known events
    whose body does not fit the envelope are logged and acknowledged.
    """
    raw_type = payload.get("event_type") if isinstance(payload, dict) else None
    logger.info(f"[PaddleWebhook] Received event: {raw_type}")
    event_type = parse_event_type(raw_type)
    if event_type is None:
        logger.info(f"[PaddleWebhook] Unhandled event type: {raw_type}")
        return None

    try:
        event = PaddleWebhookEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"[PaddleWebhook] Skipping malformed {event_type.value} event: {e}")
        return None

    EVENT_HANDLERS[event_type](db, event)
    return event_type
