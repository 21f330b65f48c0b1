import logging
from collections import namedtuple
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from errors import FetchError, ProfileSaveFailed, ValidationError
from models import Booking, Profile, Voucher
from models.booking import STATUS_CANCELLED, STATUS_CONFIRMED, STATUS_PENDING

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    "full_name": 150,
    "phone_number": 30,
    "address": 1000,
    "avatar_url": 500,
}

STATUS_BADGES = {
    STATUS_CONFIRMED: "bg-success",
    STATUS_PENDING: "bg-warning text-dark",
    STATUS_CANCELLED: "bg-danger",
}

DashboardData = namedtuple("DashboardData", ["bookings", "vouchers"])
BookingPartition = namedtuple("BookingPartition", ["upcoming", "history", "unscheduled"])


def fetch_dashboard(session, user):
    try:
        bookings = (
            session.query(Booking)
            .options(joinedload(Booking.trek))
            .filter(Booking.user_id == user.id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )
        vouchers = (
            session.query(Voucher)
            .filter(Voucher.user_id == user.id)
            .order_by(Voucher.created_at.desc(), Voucher.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise FetchError("Could not load dashboard data") from exc
    return DashboardData(bookings, vouchers)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def partition_bookings(bookings, now=None):
    """
    Split bookings into upcoming, history and unscheduled.

    Upcoming: not cancelled and the trek date is today or later.
    History: confirmed and the trek date has passed.
    Unscheduled: everything else, e.g. a pending booking whose date has
    passed or a cancelled booking in the future.
    """
    today = _as_date(now) if now is not None else date.today()
    upcoming, history, unscheduled = [], [], []
    for booking in bookings:
        trek_date = _as_date(booking.trek_date)
        if trek_date is None:
            unscheduled.append(booking)
        elif booking.status != STATUS_CANCELLED and trek_date >= today:
            upcoming.append(booking)
        elif booking.status == STATUS_CONFIRMED and trek_date < today:
            history.append(booking)
        else:
            unscheduled.append(booking)
    return BookingPartition(upcoming, history, unscheduled)


def status_badge(status):
    return STATUS_BADGES.get(status, "bg-secondary")


def format_money(value):
    if value is None:
        return "0"
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def voucher_discount_label(voucher):
    if voucher.discount_percentage:
        return f"{voucher.discount_percentage}% OFF"
    return f"₹{format_money(voucher.discount_amount)} OFF"


#-------------------------------------------------------
# Profile

def load_profile(session, user):
    """Stored profile row, or an unsaved default built from the account."""
    try:
        profile = session.get(Profile, user.id)
    except SQLAlchemyError as exc:
        session.rollback()
        raise FetchError("Could not load profile") from exc
    if profile is not None:
        return profile
    return Profile(
        id=user.id,
        email=user.email,
        full_name=user.full_name or "",
        phone_number="",
        address="",
        avatar_url="",
    )


def save_profile(session, user, data):
    values = {}
    for field, max_length in PROFILE_FIELDS.items():
        value = (data.get(field) or "").strip()
        if len(value) > max_length:
            raise ValidationError(f"{field.replace('_', ' ').capitalize()} is too long.", field=field)
        values[field] = value

    try:
        profile = session.get(Profile, user.id)
        if profile is None:
            profile = Profile(id=user.id, email=user.email)
            session.add(profile)
        for field, value in values.items():
            setattr(profile, field, value)
        if not profile.email:
            profile.email = user.email
        profile.updated_at = datetime.now(timezone.utc)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Saving profile for user %s failed", user.id)
        raise ProfileSaveFailed("Could not save your profile. Please try again.") from exc

    logger.info("Profile saved for user %s", user.id)
    return profile
