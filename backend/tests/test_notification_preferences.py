import unittest
from unittest.mock import MagicMock

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.api.auth import get_current_user
from app.crud import notification_preferences as crud_preferences
from app.models.notification_preferences import NotificationPreferences
from app.schemas.notification_preferences import NotificationPrefs
from testing_db import DatabaseTestCase, ApiTestCase


class TestPreferencesStore(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user()

    def test_load_without_row_returns_and_persists_defaults(self):
        prefs = crud_preferences.load(self.db, self.user.id)

        self.assertEqual(prefs.model_dump(), {
            "email_enabled": True,
            "reminder_30_days": True,
            "reminder_7_days": True,
            "reminder_1_day": True,
            "email_time": "09:00",
        })
        row = crud_preferences.get_by_user_id(self.db, self.user.id)
        self.assertIsNotNone(row)
        self.assertEqual(row.email_time, "09:00:00")

    def test_load_twice_creates_single_row(self):
        crud_preferences.load(self.db, self.user.id)
        crud_preferences.load(self.db, self.user.id)

        count = self.db.query(NotificationPreferences).filter(
            NotificationPreferences.user_id == self.user.id
        ).count()
        self.assertEqual(count, 1)

    def test_save_stores_seconds_and_load_truncates(self):
        prefs = NotificationPrefs(
            email_enabled=True,
            reminder_30_days=False,
            reminder_7_days=True,
            reminder_1_day=False,
            email_time="14:30",
        )
        saved = crud_preferences.save(self.db, self.user.id, prefs)

        self.assertEqual(saved.email_time, "14:30")
        row = crud_preferences.get_by_user_id(self.db, self.user.id)
        self.assertEqual(row.email_time, "14:30:00")

        loaded = crud_preferences.load(self.db, self.user.id)
        self.assertEqual(loaded, prefs)

    def test_save_overwrites_existing_row(self):
        crud_preferences.load(self.db, self.user.id)
        crud_preferences.save(self.db, self.user.id, NotificationPrefs(
            email_enabled=False,
            reminder_30_days=False,
            reminder_7_days=False,
            reminder_1_day=False,
            email_time="07:15",
        ))

        rows = self.db.query(NotificationPreferences).all()
        self.assertEqual(len(rows), 1)
        self.assertFalse(rows[0].email_enabled)
        self.assertEqual(rows[0].email_time, "07:15:00")

    def test_set_reminder_flags_requires_existing_row(self):
        self.assertFalse(crud_preferences.set_reminder_flags(self.db, self.user.id, reminder_1_day=False))

        crud_preferences.load(self.db, self.user.id)
        self.assertTrue(crud_preferences.set_reminder_flags(self.db, self.user.id, reminder_1_day=False))
        self.db.commit()
        self.assertFalse(crud_preferences.load(self.db, self.user.id).reminder_1_day)

    def test_email_time_must_be_hh_mm(self):
        for bad in ("9:00", "24:00", "12:60", "12:30:00", ""):
            with self.assertRaises(ValidationError):
                NotificationPrefs(
                    email_enabled=True,
                    reminder_30_days=True,
                    reminder_7_days=True,
                    reminder_1_day=True,
                    email_time=bad,
                )


class TestPreferencesStoreErrors(unittest.TestCase):
    def test_load_rolls_back_and_reraises(self):
        db = MagicMock()
        db.query.side_effect = SQLAlchemyError("connection lost")

        with self.assertRaises(SQLAlchemyError):
            crud_preferences.load(db, "user-1")
        db.rollback.assert_called_once()

    def test_save_rolls_back_and_reraises(self):
        db = MagicMock()
        db.commit.side_effect = SQLAlchemyError("constraint failed")

        with self.assertRaises(SQLAlchemyError):
            crud_preferences.save(db, "user-1", crud_preferences.DEFAULT_PREFERENCES)
        db.rollback.assert_called_once()


class TestPreferencesApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user()
        self.login_as(self.user)

    def test_get_returns_defaults(self):
        response = self.client.get("/notifications/preferences")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email_time"], "09:00")

    def test_put_round_trip(self):
        body = {
            "email_enabled": False,
            "reminder_30_days": True,
            "reminder_7_days": False,
            "reminder_1_day": True,
            "email_time": "18:45",
        }
        response = self.client.put("/notifications/preferences", json=body)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), body)
        self.assertEqual(self.client.get("/notifications/preferences").json(), body)

    def test_put_rejects_partial_body(self):
        response = self.client.put("/notifications/preferences", json={"email_enabled": False})
        self.assertEqual(response.status_code, 422)

    def test_requires_sign_in(self):
        self.app.dependency_overrides.pop(get_current_user)
        response = self.client.get("/notifications/preferences")
        self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
