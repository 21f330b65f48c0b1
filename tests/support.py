"""Shared fixtures: an app bound to in-memory SQLite and a few row factories."""
import unittest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from app import create_app
from extensions import db
from models import Trek, User

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "MAIL_SUPPRESS_SEND": True,
    "ALLOW_MISSING_ORIGIN": True,
    "LOG_LEVEL": "WARNING",
}

PASSWORD = "secret123"


def future_date(days=30):
    return date.today() + timedelta(days=days)


class AppTestCase(unittest.TestCase):
    config_overrides = {}

    def setUp(self):
        config = dict(TEST_CONFIG)
        config.update(self.config_overrides)
        self.app = create_app(config)
        self.ctx = self.app.app_context()
        self.ctx.push()
        db.create_all()
        self.client = self.app.test_client()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def make_user(self, email="asha@example.com", full_name="Asha Rao", password=PASSWORD, confirmed=True):
        user = User(email=email, full_name=full_name)
        user.set_password(password)
        if confirmed:
            user.email_confirmed_at = datetime.now(timezone.utc)
        db.session.add(user)
        db.session.commit()
        return user

    def make_trek(self, **overrides):
        values = {
            "title": "Kedarkantha Winter Trek",
            "description": "Snow trek through pine forests",
            "duration": "6 Days",
            "difficulty": "Easy to Moderate",
            "price": Decimal("11500"),
            "itinerary": [
                {"day": "dayOne", "activity": "Drive to Sankri"},
                {"day": "dayTwo", "activity": "Trek to Juda ka Talab"},
            ],
            "highlights": ["Summit sunrise"],
            "trek_essentials": ["Headlamp"],
        }
        values.update(overrides)
        trek = Trek(**values)
        db.session.add(trek)
        db.session.commit()
        return trek

    def sign_in(self, email="asha@example.com", password=PASSWORD):
        return self.client.post("/auth/signin", data={"email": email, "password": password})
