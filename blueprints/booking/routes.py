import logging
from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for, flash, session
from flask_login import login_required, current_user

from errors import BookingFailed, FetchError, NotFound, ValidationError
from extensions import db
from services.booking_flow import (
    FIELD_MAX_LENGTHS,
    MAX_PARTICIPANTS,
    BookingDraft,
    consume_form_token,
    create_booking,
    issue_form_token,
)
from services.catalog import get_trek
from services.dashboard_data import load_profile

logger = logging.getLogger(__name__)

booking_bp = Blueprint("booking", __name__, template_folder="../../templates")


def _render_form(trek, draft, error=None):
    return render_template(
        "book.html",
        trek=trek,
        draft=draft,
        total_amount=draft.total_amount(trek.price),
        form_token=issue_form_token(session),
        error=error,
        today=date.today().isoformat(),
        max_participants=MAX_PARTICIPANTS,
        max_lengths=FIELD_MAX_LENGTHS,
    )


@booking_bp.route("/trek/<int:trek_id>/book", methods=["GET", "POST"])
@login_required
def book(trek_id):
    try:
        trek = get_trek(db.session, trek_id)
    except NotFound:
        logger.warning("Trek %s not found, redirecting to catalog", trek_id)
        return redirect(url_for("treks.index"))
    except FetchError:
        logger.exception("Error fetching trek %s", trek_id)
        return redirect(url_for("treks.index"))

    if request.method == "GET":
        try:
            profile = load_profile(db.session, current_user)
        except FetchError:
            logger.exception("Error fetching profile for user %s", current_user.id)
            profile = None
        return _render_form(trek, BookingDraft.for_user(current_user, profile))

    draft = BookingDraft.from_form(request.form, current_user.email)
    action = request.form.get("action", "submit")

    # participant count buttons
    if action == "add":
        draft.set_participant_count(draft.participant_count + 1)
        return _render_form(trek, draft)
    if action == "remove":
        draft.set_participant_count(draft.participant_count - 1)
        return _render_form(trek, draft)

    if not consume_form_token(session, request.form.get("form_token")):
        flash("This booking has already been submitted.", "info")
        return redirect(url_for("dashboard.index"))

    try:
        create_booking(db.session, trek, current_user, draft)
    except ValidationError as exc:
        flash(str(exc), "danger")
        return _render_form(trek, draft, error=exc)
    except BookingFailed as exc:
        flash(str(exc), "danger")
        return _render_form(trek, draft)

    flash("Booking successful! Your trek has been booked. Check your dashboard for details.", "success")
    return redirect(url_for("dashboard.index"))
