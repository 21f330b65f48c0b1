import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user

from errors import FetchError, ProfileSaveFailed, ValidationError
from extensions import db
from services.dashboard_data import (
    DashboardData,
    fetch_dashboard,
    load_profile,
    partition_bookings,
    save_profile,
)

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__, template_folder="../../templates")

TABS = ("bookings", "history", "vouchers", "profile")


#-------------------------------------------------------
# Dashboard
@dashboard_bp.route("/dashboard")
@login_required
def index():
    tab = request.args.get("tab", "bookings")
    if tab not in TABS:
        tab = "bookings"
    editing = tab == "profile" and request.args.get("edit") == "1"

    load_failed = False
    try:
        data = fetch_dashboard(db.session, current_user)
    except FetchError:
        logger.exception("Error fetching dashboard data for user %s", current_user.id)
        data = DashboardData([], [])
        load_failed = True

    try:
        profile = load_profile(db.session, current_user)
    except FetchError:
        logger.exception("Error fetching profile for user %s", current_user.id)
        profile = None

    return render_template(
        "dashboard.html",
        tab=tab,
        editing=editing,
        load_failed=load_failed,
        partition=partition_bookings(data.bookings),
        vouchers=data.vouchers,
        profile=profile,
    )


#-------------------------------------------------------
# Profile
@dashboard_bp.route("/dashboard/profile", methods=["POST"])
@login_required
def update_profile():
    try:
        save_profile(db.session, current_user, request.form)
    except (ValidationError, ProfileSaveFailed) as exc:
        flash(str(exc), "danger")
        return redirect(url_for("dashboard.index", tab="profile", edit=1))

    flash("Your profile has been updated.", "success")
    return redirect(url_for("dashboard.index", tab="profile"))
