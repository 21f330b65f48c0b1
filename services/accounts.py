import logging
import smtplib
from datetime import datetime, timezone

from flask import current_app
from flask_mail import Message
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import AuthError, ValidationError
from extensions import mail
from models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
CONFIRM_SALT = "trekbook-email-confirm"


def normalize_email(email):
    return (email or "").strip().lower()


def sign_in(session, email, password, require_confirmation=False):
    email = normalize_email(email)
    if not email or not password:
        raise AuthError("Please enter your email and password.")

    user = session.query(User).filter_by(email=email).first()
    if user is None or not user.check_password(password):
        logger.info("Failed sign-in for %s", email)
        raise AuthError("Invalid email or password.")
    if require_confirmation and not user.email_confirmed:
        raise AuthError("Please confirm your email address before signing in.")
    return user


def sign_up(session, email, password, full_name, confirm_password=None):
    email = normalize_email(email)
    full_name = (full_name or "").strip()
    if not email or not password or not full_name:
        raise ValidationError("Please fill in your name, email and password.")
    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords don't match.", field="confirm_password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", field="password"
        )

    if session.query(User).filter_by(email=email).first():
        raise AuthError("An account with this email already exists.")

    user = User(email=email, full_name=full_name)
    user.set_password(password)
    try:
        session.add(user)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise AuthError("An account with this email already exists.") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Sign-up for %s failed", email)
        raise AuthError("Could not create your account. Please try again.") from exc

    logger.info("User %s signed up", user.id)
    return user


#-------------------------------------------------------
# Email confirmation

def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=CONFIRM_SALT)


def make_confirmation_token(user):
    return _serializer().dumps({"uid": user.id, "email": user.email})


def confirm_email(session, token, max_age=None):
    max_age = max_age or current_app.config.get("EMAIL_CONFIRM_MAX_AGE")
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except SignatureExpired as exc:
        raise AuthError("This confirmation link has expired.") from exc
    except BadSignature as exc:
        raise AuthError("This confirmation link is invalid.") from exc

    user = session.get(User, payload.get("uid"))
    if user is None or user.email != payload.get("email"):
        raise AuthError("This confirmation link is invalid.")

    if user.email_confirmed_at is None:
        user.email_confirmed_at = datetime.now(timezone.utc)
        session.commit()
        logger.info("User %s confirmed their email", user.id)
    return user


def send_confirmation_email(user, confirm_url):
    """Returns False when the mail server could not be reached."""
    msg = Message(
        subject="Confirm your Trekbook account",
        recipients=[user.email],
        body=(
            f"Hi {user.display_name},\n\n"
            "Thanks for signing up. Confirm your email address by opening this link:\n"
            f"{confirm_url}\n\n"
            "If you did not create an account you can ignore this message."
        ),
    )
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Could not send confirmation email to user %s", user.id)
        return False
    return True


#-------------------------------------------------------
# OAuth

def sign_in_with_oauth(session, provider, subject, email, full_name=None):
    """
    Find or create the account for an identity returned by an OAuth provider.

    Accounts are matched on (provider, subject) first, then on a verified email
    so an existing password account gets linked instead of duplicated.
    """
    email = normalize_email(email)
    if not subject or not email:
        raise AuthError("The sign-in provider did not return a verified email address.")

    user = session.query(User).filter_by(oauth_provider=provider, oauth_subject=subject).first()
    if user is None:
        user = session.query(User).filter_by(email=email).first()
        if user is None:
            user = User(email=email, full_name=(full_name or "").strip() or None)
            session.add(user)
        user.oauth_provider = provider
        user.oauth_subject = subject

    if user.email_confirmed_at is None:
        user.email_confirmed_at = datetime.now(timezone.utc)
    if not user.full_name and full_name:
        user.full_name = full_name.strip()

    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("OAuth sign-in via %s failed for %s", provider, email)
        raise AuthError("Could not sign you in. Please try again.") from exc
    return user
