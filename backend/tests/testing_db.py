"""
Shared fixtures for the test suites: an in-memory SQLite database and a
TestClient wired to it through dependency overrides.
"""
import unittest
from datetime import date, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
import app.models
from app.models.user import User
from app.models.subscription import Subscription
from config import PaddleSettings

# One connection shared by every session so the in-memory DB survives between them
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SANDBOX_SETTINGS = PaddleSettings(
    api_token="pdl_sandbox_apikey_01",
    webhook_secret="pdl_ntfset_secret",
    database_url=SQLALCHEMY_DATABASE_URL,
    environment="sandbox",
)


class DatabaseTestCase(unittest.TestCase):
    def setUp(self):
        Base.metadata.create_all(bind=engine)
        self.db = TestingSessionLocal()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def create_user(self, email="alice@example.com", full_name="Alice", user_id=None):
        user = User(email=email, full_name=full_name)
        if user_id:
            user.id = user_id
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_subscription(self, user, service_name="Netflix", cost="15.99", days=3,
                            status="active", today=None):
        today = today or date.today()
        sub = Subscription(
            user_id=user.id,
            service_name=service_name,
            cost=Decimal(cost),
            billing_cycle="monthly",
            next_renewal=today + timedelta(days=days),
            category="other",
            status=status,
        )
        self.db.add(sub)
        self.db.commit()
        self.db.refresh(sub)
        return sub


class ApiTestCase(DatabaseTestCase):
    """Routes run against self.db; Paddle settings default to a valid sandbox setup."""

    paddle_settings = SANDBOX_SETTINGS

    def setUp(self):
        super().setUp()
        from app.main import app
        from app.api.paddle_webhook import get_paddle_settings

        def override_get_db():
            yield self.db

        self.app = app
        self.app.dependency_overrides[get_db] = override_get_db
        self.app.dependency_overrides[get_paddle_settings] = lambda: self.paddle_settings
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()
        super().tearDown()

    def login_as(self, user):
        from app.api.auth import get_current_user
        self.app.dependency_overrides[get_current_user] = lambda: user
