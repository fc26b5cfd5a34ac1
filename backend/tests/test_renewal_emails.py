import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

import httpx
import pytz

from app.crud import notification_preferences as crud_preferences
from app.crud import user_plan as crud_user_plan
from app.models.email_log import EmailLog
from app.models.user_plan import PlanType
from app.schemas.notification_preferences import NotificationPrefs
from app.services import renewal_email_service
from app.services.email_service import EmailService
from testing_db import DatabaseTestCase

NINE_AM = pytz.utc.localize(datetime(2026, 3, 10, 9, 0))


class FakeSender:
    def __init__(self, result=True):
        self.result = result
        self.sent = []

    def send(self, to, subject, html):
        self.sent.append((to, subject, html))
        return self.result


def prefs(**overrides):
    values = crud_preferences.DEFAULT_PREFERENCES.model_dump()
    values.update(overrides)
    return NotificationPrefs(**values)


class TestReminderRules(unittest.TestCase):
    def test_free_plan_window(self):
        self.assertTrue(renewal_email_service.should_send("free", prefs(), 7))
        self.assertTrue(renewal_email_service.should_send("free", prefs(), 0))
        self.assertFalse(renewal_email_service.should_send("free", prefs(), 30))
        self.assertFalse(renewal_email_service.should_send("free", prefs(reminder_7_days=False), 3))

    def test_pro_plan_flags(self):
        self.assertTrue(renewal_email_service.should_send("pro", prefs(), 30))
        self.assertFalse(renewal_email_service.should_send("pro", prefs(reminder_30_days=False), 30))
        self.assertTrue(renewal_email_service.should_send("pro", prefs(reminder_7_days=False), 1))
        self.assertFalse(renewal_email_service.should_send("pro", prefs(), 12))

    def test_overdue_needs_only_email_enabled(self):
        self.assertTrue(renewal_email_service.should_send("free", prefs(reminder_7_days=False), -4))
        self.assertFalse(renewal_email_service.should_send("pro", prefs(email_enabled=False), -4))

    def test_due_in_configured_hour(self):
        self.assertTrue(renewal_email_service.is_due(prefs(email_time="09:30"), NINE_AM))
        self.assertFalse(renewal_email_service.is_due(prefs(email_time="10:00"), NINE_AM))

    def test_subjects(self):
        self.assertEqual(renewal_email_service.email_subject("Netflix", -2), "OVERDUE: Netflix Payment")
        self.assertEqual(renewal_email_service.email_subject("Netflix", 1), "TOMORROW: Netflix Renews Tomorrow")
        self.assertEqual(renewal_email_service.email_subject("Netflix", 4), "4 Days: Netflix Renewal Reminder")


class TestRenewalEmailJob(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user()
        crud_preferences.load(self.db, self.user.id)
        self.sub = self.create_subscription(self.user, days=3, today=NINE_AM.date())
        self.sender = FakeSender()

    def run_job(self, now=NINE_AM, **kwargs):
        return renewal_email_service.send_renewal_emails(self.db, now=now, sender=self.sender, **kwargs)

    def test_sends_and_logs_once_per_day(self):
        result = self.run_job()

        self.assertTrue(result["success"])
        self.assertEqual(result["emailsSent"], 1)
        to, subject, html = self.sender.sent[0]
        self.assertEqual(to, "alice@example.com")
        self.assertEqual(subject, "3 Days: Netflix Renewal Reminder")
        self.assertIn("Hi Alice", html)

        log = self.db.query(EmailLog).one()
        self.assertEqual(log.subscription_id, self.sub.id)
        self.assertEqual(log.email_type, "renewal_reminder")

        self.assertEqual(self.run_job(now=NINE_AM.replace(minute=45))["emailsSent"], 0)
        self.assertEqual(self.db.query(EmailLog).count(), 1)

    def test_outside_email_hour(self):
        self.assertEqual(self.run_job(now=NINE_AM.replace(hour=14))["emailsSent"], 0)
        self.assertEqual(self.sender.sent, [])

    def test_force_ignores_hour_and_rules(self):
        self.sub.next_renewal = NINE_AM.date().replace(month=6)
        self.db.commit()

        result = self.run_job(now=NINE_AM.replace(hour=14), force=True)

        self.assertEqual(result["emailsSent"], 1)

    def test_users_without_preferences_get_no_email(self):
        carol = self.create_user(email="carol@example.com", full_name="Carol")
        self.create_subscription(carol, service_name="Dropbox", days=-2, today=NINE_AM.date())

        result = self.run_job()

        self.assertEqual([d["subscription"] for d in result["details"]], ["Netflix"])
        self.assertEqual(self.run_job(user_id=carol.id, force=True)["emailsSent"], 1)

    def test_disabled_email(self):
        crud_preferences.save(self.db, self.user.id, prefs(email_enabled=False))
        self.assertEqual(self.run_job()["emailsSent"], 0)

    def test_pro_thirty_day_notice(self):
        crud_user_plan.apply_plan(self.db, self.user.id, PlanType.PRO)
        self.db.commit()
        self.sub.next_renewal = datetime(2026, 4, 9).date()
        self.db.commit()

        result = self.run_job()

        self.assertEqual(result["details"][0]["days"], 30)
        self.assertEqual(result["details"][0]["subject"], "30 Days: Netflix Renewal Notice")

    def test_test_mode_previews_without_sending(self):
        result = self.run_job(test=True)

        self.assertEqual(result["emailsSent"], 1)
        self.assertEqual(result["message"], "TEST MODE - no emails actually sent")
        self.assertEqual(self.sender.sent, [])
        self.assertEqual(self.db.query(EmailLog).count(), 0)

    def test_failed_send_is_not_logged(self):
        self.sender.result = False
        self.assertEqual(self.run_job()["emailsSent"], 0)
        self.assertEqual(self.db.query(EmailLog).count(), 0)

    def test_scoped_to_user(self):
        other = self.create_user(email="bob@example.com", full_name="Bob")
        crud_preferences.load(self.db, other.id)
        self.create_subscription(other, service_name="Slack", days=2, today=NINE_AM.date())

        result = self.run_job(user_id=other.id)

        self.assertEqual([d["subscription"] for d in result["details"]], ["Slack"])


class TestEmailService(unittest.TestCase):
    def setUp(self):
        self.service = EmailService()
        self.service.service_id = "service_x"
        self.service.template_id = "template_x"
        self.service.user_id = "user_x"

    def test_not_configured(self):
        self.service.user_id = ""
        self.assertFalse(self.service.send("a@example.com", "s", "<p>x</p>"))

    @patch("app.services.email_service.httpx.Client")
    def test_success(self, MockClient):
        post = MockClient.return_value.__enter__.return_value.post
        post.return_value = httpx.Response(200, text="OK")

        self.assertTrue(self.service.send("a@example.com", "Subject", "<p>x</p>"))
        payload = post.call_args.kwargs["json"]
        self.assertEqual(payload["service_id"], "service_x")
        self.assertEqual(payload["template_params"]["to_email"], "a@example.com")

    @patch("app.services.email_service.httpx.Client")
    def test_rejected_request_counts_as_sent(self, MockClient):
        MockClient.return_value.__enter__.return_value.post.return_value = httpx.Response(400, text="bad")
        self.assertTrue(self.service.send("a@example.com", "Subject", "<p>x</p>"))

    @patch("app.services.email_service.httpx.Client")
    def test_transport_error(self, MockClient):
        MockClient.return_value.__enter__.return_value.post.side_effect = httpx.ConnectError("down")
        self.assertFalse(self.service.send("a@example.com", "Subject", "<p>x</p>"))


class TestSchedulerTask(unittest.TestCase):
    @patch("app.tasks.scheduler.renewal_email_service.send_renewal_emails")
    @patch("app.tasks.scheduler.SessionLocal")
    def test_task_opens_and_closes_session(self, MockSession, mock_send):
        from app.tasks.scheduler import send_renewal_emails_task
        mock_send.return_value = {"success": True, "emailsSent": 0, "details": [], "message": "Sent 0 emails"}

        result = send_renewal_emails_task(test=True)

        self.assertEqual(result["message"], "Sent 0 emails")
        mock_send.assert_called_once_with(MockSession.return_value, force=False, test=True, user_id=None)
        MockSession.return_value.close.assert_called_once()

    def test_hourly_beat_schedule(self):
        from app.celery_app import celery_app
        import app.tasks.scheduler
        entry = celery_app.conf.beat_schedule["renewal-emails-hourly"]
        self.assertEqual(entry["task"], "app.tasks.scheduler.send_renewal_emails_task")


if __name__ == '__main__':
    unittest.main()
