from app.celery_app import celery_app
from sqlalchemy.orm import Session
from app.database import SessionLocal
from app.services import renewal_email_service
from celery.schedules import crontab
import logging

logger = logging.getLogger(__name__)


@celery_app.task
def send_renewal_emails_task(force: bool = False, test: bool = False, user_id: str = None):
    """
    Beat task: runs every hour.
    Each user is only e-mailed during the hour of their configured email_time.
    """
    db: Session = SessionLocal()
    try:
        result = renewal_email_service.send_renewal_emails(db, force=force, test=test, user_id=user_id)
        logger.info(f"Renewal e-mail job finished: {result['message']}")
        return result
    except Exception as e:
        db.rollback()
        logger.error(f"Renewal e-mail job failed: {e}")
        raise
    finally:
        db.close()


celery_app.conf.beat_schedule = {
    'renewal-emails-hourly': {
        'task': 'app.tasks.scheduler.send_renewal_emails_task',
        'schedule': crontab(minute=0)
    },
}
