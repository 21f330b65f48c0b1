"""
Booking form state and booking creation.

A `BookingDraft` holds what the booking page shows between posts: the trek
date and one `ParticipantDraft` per participant. The list of drafts always has
exactly `participant_count` entries and entry 0 is the signed-in user.
"""
import logging
import secrets
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from errors import BookingFailed, ValidationError
from models import Booking, Participant
from models.booking import STATUS_PENDING

logger = logging.getLogger(__name__)

PARTICIPANT_FIELDS = ("name", "email", "phone_number", "address")
# column sizes in models/participant.py; address is Text
FIELD_MAX_LENGTHS = {"name": 150, "email": 255, "phone_number": 30}
MAX_PARTICIPANTS = 20
FORM_TOKENS_KEY = "booking_form_tokens"
MAX_OUTSTANDING_TOKENS = 20


class ParticipantDraft:
    def __init__(self, name="", email="", phone_number="", address="", is_primary_user=False):
        self.name = name or ""
        self.email = email or ""
        self.phone_number = phone_number or ""
        self.address = address or ""
        self.is_primary_user = is_primary_user

    def missing_field(self):
        for field in PARTICIPANT_FIELDS:
            if not getattr(self, field).strip():
                return field
        return None

    def too_long_field(self):
        for field, max_length in FIELD_MAX_LENGTHS.items():
            if len(getattr(self, field).strip()) > max_length:
                return field
        return None

    def to_model(self, booking):
        return Participant(
            booking_id=booking.id,
            name=self.name.strip(),
            email=self.email.strip(),
            phone_number=self.phone_number.strip(),
            address=self.address.strip(),
            is_primary_user=self.is_primary_user,
        )


class BookingDraft:
    def __init__(self, primary, participant_count=1, trek_date=""):
        primary.is_primary_user = True
        self.participants = [primary]
        self.participant_count = 1
        self.trek_date = trek_date or ""
        self.set_participant_count(participant_count)

    @classmethod
    def for_user(cls, user, profile=None):
        """Start a draft whose primary participant is pre-filled from the profile."""
        primary = ParticipantDraft(
            name=(profile.full_name if profile else None) or user.full_name or "",
            email=(profile.email if profile else None) or user.email,
            phone_number=(profile.phone_number if profile else None) or "",
            address=(profile.address if profile else None) or "",
            is_primary_user=True,
        )
        return cls(primary)

    @classmethod
    def from_form(cls, form, primary_email):
        try:
            count = int(form.get("participant_count", 1))
        except (TypeError, ValueError):
            count = 1
        count = max(1, min(count, MAX_PARTICIPANTS))

        drafts = []
        for index in range(count):
            values = {
                field: form.get(f"participants-{index}-{field}", "")
                for field in PARTICIPANT_FIELDS
            }
            drafts.append(ParticipantDraft(**values))

        # the primary participant's email is the account email
        drafts[0].email = primary_email

        draft = cls(drafts[0], trek_date=form.get("trek_date", "").strip())
        draft.participants.extend(drafts[1:])
        draft.participant_count = len(draft.participants)
        return draft

    def set_participant_count(self, count):
        count = max(1, min(int(count), MAX_PARTICIPANTS))
        if len(self.participants) < count:
            self.participants.extend(
                ParticipantDraft() for _ in range(count - len(self.participants))
            )
        elif len(self.participants) > count:
            del self.participants[count:]
        self.participant_count = count
        return self.participants

    def update_participant(self, index, field, value):
        if field not in PARTICIPANT_FIELDS:
            raise ValueError(f"Unknown participant field: {field}")
        if index == 0 and field == "email":
            return False
        setattr(self.participants[index], field, value or "")
        return True

    def total_amount(self, price):
        unit = Decimal(str(price)) if price is not None else Decimal("0")
        return unit * self.participant_count

    def parsed_trek_date(self):
        try:
            return date.fromisoformat(self.trek_date)
        except (TypeError, ValueError):
            return None

    def validate(self, today=None):
        if not self.trek_date:
            raise ValidationError("Please choose a trek date.", field="trek_date")
        trek_date = self.parsed_trek_date()
        if trek_date is None:
            raise ValidationError("The trek date is not a valid date.", field="trek_date")
        if trek_date < (today or date.today()):
            raise ValidationError("The trek date cannot be in the past.", field="trek_date")

        for index, participant in enumerate(self.participants):
            field = participant.missing_field()
            if field:
                raise ValidationError(
                    f"Please fill in all details for participant {index + 1}.",
                    index=index,
                    field=field,
                )
            field = participant.too_long_field()
            if field:
                raise ValidationError(
                    f"The {field.replace('_', ' ')} of participant {index + 1} is too long.",
                    index=index,
                    field=field,
                )


def create_booking(session, trek, user, draft, today=None):
    """
    Persist the booking and all of its participants as one unit.

    Validation runs first so nothing is inserted for an incomplete form. Any
    database error rolls back both the booking row and the participant rows.
    """
    draft.validate(today=today)

    booking = Booking(
        user_id=user.id,
        trek_id=trek.id,
        trek_date=draft.parsed_trek_date(),
        total_participants=draft.participant_count,
        total_amount=draft.total_amount(trek.price),
        status=STATUS_PENDING,
    )
    try:
        session.add(booking)
        session.flush()
        session.add_all([participant.to_model(booking) for participant in draft.participants])
        session.flush()
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Booking for trek %s by user %s failed", trek.id, user.id)
        raise BookingFailed("There was an error processing your booking. Please try again.") from exc

    logger.info(
        "Booking %s created: trek=%s user=%s participants=%s amount=%s",
        booking.id, trek.id, user.id, booking.total_participants, booking.total_amount,
    )
    return booking


def issue_form_token(store):
    token = secrets.token_urlsafe(16)
    tokens = list(store.get(FORM_TOKENS_KEY, []))
    tokens.append(token)
    store[FORM_TOKENS_KEY] = tokens[-MAX_OUTSTANDING_TOKENS:]
    return token


def consume_form_token(store, token):
    """Spend a token once; a second submit of the same form returns False."""
    tokens = list(store.get(FORM_TOKENS_KEY, []))
    if not token or token not in tokens:
        return False
    tokens.remove(token)
    store[FORM_TOKENS_KEY] = tokens
    return True
