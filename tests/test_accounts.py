import unittest
import warnings
from datetime import datetime, timedelta, timezone

from itsdangerous import URLSafeTimedSerializer

from errors import AuthError, ValidationError
from extensions import db, mail
from models import User
from services.accounts import (
    confirm_email,
    make_confirmation_token,
    normalize_email,
    send_confirmation_email,
    sign_in,
    sign_in_with_oauth,
    sign_up,
)

from support import AppTestCase, PASSWORD


class SignUpTests(AppTestCase):
    def test_creates_account_with_hashed_password(self):
        user = sign_up(db.session, " Asha@Example.com ", PASSWORD, "Asha Rao", confirm_password=PASSWORD)
        self.assertEqual(user.email, "asha@example.com")
        self.assertNotEqual(user.password_hash, PASSWORD)
        self.assertTrue(user.check_password(PASSWORD))
        self.assertFalse(user.email_confirmed)

    def test_duplicate_email_is_rejected(self):
        self.make_user()
        with self.assertRaises(AuthError):
            sign_up(db.session, "ASHA@example.com", PASSWORD, "Someone Else")
        self.assertEqual(User.query.count(), 1)

    def test_password_mismatch(self):
        with self.assertRaises(ValidationError) as ctx:
            sign_up(db.session, "asha@example.com", PASSWORD, "Asha", confirm_password="different")
        self.assertEqual(ctx.exception.field, "confirm_password")

    def test_short_password(self):
        with self.assertRaises(ValidationError) as ctx:
            sign_up(db.session, "asha@example.com", "123", "Asha")
        self.assertEqual(ctx.exception.field, "password")

    def test_missing_fields(self):
        with self.assertRaises(ValidationError):
            sign_up(db.session, "", PASSWORD, "Asha")
        with self.assertRaises(ValidationError):
            sign_up(db.session, "asha@example.com", PASSWORD, "  ")


class SignInTests(AppTestCase):
    def test_valid_credentials(self):
        created = self.make_user()
        self.assertEqual(sign_in(db.session, "ASHA@example.com", PASSWORD).id, created.id)

    def test_wrong_password_and_unknown_email_share_a_message(self):
        self.make_user()
        with self.assertRaises(AuthError) as wrong:
            sign_in(db.session, "asha@example.com", "nope")
        with self.assertRaises(AuthError) as unknown:
            sign_in(db.session, "ghost@example.com", PASSWORD)
        self.assertEqual(str(wrong.exception), str(unknown.exception))

    def test_blank_input(self):
        with self.assertRaises(AuthError):
            sign_in(db.session, "", "")

    def test_oauth_only_account_cannot_use_a_password(self):
        db.session.add(User(email="g@example.com", oauth_provider="google", oauth_subject="1"))
        db.session.commit()
        with self.assertRaises(AuthError):
            sign_in(db.session, "g@example.com", "anything")

    def test_unconfirmed_account_when_confirmation_is_required(self):
        self.make_user(confirmed=False)
        self.assertIsNotNone(sign_in(db.session, "asha@example.com", PASSWORD))
        with self.assertRaises(AuthError):
            sign_in(db.session, "asha@example.com", PASSWORD, require_confirmation=True)


class ConfirmationTests(AppTestCase):
    def test_token_confirms_the_account(self):
        user = self.make_user(confirmed=False)
        confirm_email(db.session, make_confirmation_token(user))
        self.assertTrue(db.session.get(User, user.id).email_confirmed)

    def test_confirmation_time_is_current_utc(self):
        user = self.make_user(confirmed=False)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            confirm_email(db.session, make_confirmation_token(user))
        self.assertFalse([w for w in caught if "utcnow" in str(w.message)])

        stamp = db.session.get(User, user.id).email_confirmed_at
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        self.assertLess(abs(datetime.now(timezone.utc) - stamp), timedelta(minutes=5))

    def test_tampered_token_is_rejected(self):
        user = self.make_user(confirmed=False)
        with self.assertRaises(AuthError):
            confirm_email(db.session, make_confirmation_token(user) + "x")

    def test_token_signed_with_another_key_is_rejected(self):
        user = self.make_user(confirmed=False)
        forged = URLSafeTimedSerializer("other-key", salt="trekbook-email-confirm").dumps(
            {"uid": user.id, "email": user.email}
        )
        with self.assertRaises(AuthError):
            confirm_email(db.session, forged)

    def test_confirmation_email_is_sent(self):
        user = self.make_user(confirmed=False)
        with mail.record_messages() as outbox:
            self.assertTrue(send_confirmation_email(user, "http://localhost/auth/confirm/abc"))
        self.assertEqual(len(outbox), 1)
        self.assertEqual(outbox[0].recipients, ["asha@example.com"])
        self.assertIn("http://localhost/auth/confirm/abc", outbox[0].body)


class OAuthTests(AppTestCase):
    def test_new_identity_creates_a_confirmed_account(self):
        user = sign_in_with_oauth(db.session, "google", "sub-1", "New@Example.com", "New Person")
        self.assertEqual(user.email, "new@example.com")
        self.assertEqual(user.full_name, "New Person")
        self.assertIsNone(user.password_hash)
        self.assertTrue(user.email_confirmed)

    def test_existing_email_account_is_linked(self):
        existing = self.make_user(confirmed=False)
        user = sign_in_with_oauth(db.session, "google", "sub-1", "asha@example.com", "Asha")
        self.assertEqual(user.id, existing.id)
        self.assertEqual(user.oauth_subject, "sub-1")
        self.assertTrue(user.check_password(PASSWORD))
        self.assertEqual(User.query.count(), 1)

    def test_known_subject_wins_over_changed_email(self):
        first = sign_in_with_oauth(db.session, "google", "sub-1", "old@example.com")
        again = sign_in_with_oauth(db.session, "google", "sub-1", "renamed@example.com")
        self.assertEqual(first.id, again.id)
        self.assertEqual(User.query.count(), 1)

    def test_missing_email_is_rejected(self):
        with self.assertRaises(AuthError):
            sign_in_with_oauth(db.session, "google", "sub-1", None)


class NormalizeEmailTests(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_email("  Asha@Example.COM "), "asha@example.com")
        self.assertEqual(normalize_email(None), "")


if __name__ == "__main__":
    unittest.main()
