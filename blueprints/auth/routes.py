import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, session
from flask_login import login_user, logout_user, login_required, current_user
from authlib.integrations.base_client import OAuthError

from errors import AuthError, ValidationError
from extensions import db, oauth
from security import safe_redirect_target
from services.accounts import (
    confirm_email,
    make_confirmation_token,
    send_confirmation_email,
    sign_in,
    sign_in_with_oauth,
    sign_up,
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, template_folder="../../templates")

OAUTH_REDIRECT_KEY = "oauth_redirect"


def _redirect_target():
    return safe_redirect_target(request.values.get("redirect"))


def _google_client():
    if not (current_app.config.get("GOOGLE_CLIENT_ID") and current_app.config.get("GOOGLE_CLIENT_SECRET")):
        return None
    return oauth.create_client("google")


#-------------------------------------------------------
# Sign in
@auth_bp.route("/signin", methods=["GET", "POST"])
def signin():
    target = _redirect_target()
    if current_user.is_authenticated:
        return redirect(target)

    if request.method == "POST":
        email = request.form.get("email", "")
        try:
            user = sign_in(
                db.session,
                email,
                request.form.get("password", ""),
                require_confirmation=current_app.config.get("REQUIRE_EMAIL_CONFIRMATION", False),
            )
        except AuthError as exc:
            flash(str(exc), "danger")
            return render_template("auth/signin.html", redirect_to=target, email=email)

        login_user(user, remember=bool(request.form.get("remember")))
        logger.info("User %s signed in", user.id)
        flash("Welcome back! You have been signed in successfully.", "success")
        return redirect(target)

    return render_template("auth/signin.html", redirect_to=target, email="")


#-------------------------------------------------------
# Sign up
@auth_bp.route("/signup", methods=["GET", "POST"])
def signup():
    target = _redirect_target()
    if current_user.is_authenticated:
        return redirect(target)

    if request.method == "POST":
        full_name = request.form.get("full_name", "")
        email = request.form.get("email", "")
        try:
            user = sign_up(
                db.session,
                email,
                request.form.get("password", ""),
                full_name,
                confirm_password=request.form.get("confirm_password", ""),
            )
        except (AuthError, ValidationError) as exc:
            flash(str(exc), "danger")
            return render_template("auth/signup.html", redirect_to=target, full_name=full_name, email=email)

        confirm_url = url_for("auth.confirm", token=make_confirmation_token(user), _external=True)
        if send_confirmation_email(user, confirm_url):
            flash("Account created! Please check your email to verify your account.", "success")
        else:
            flash("Account created, but we could not send the confirmation email.", "warning")

        if current_app.config.get("REQUIRE_EMAIL_CONFIRMATION", False):
            return redirect(url_for("auth.signin", redirect=target))
        login_user(user)
        return redirect(target)

    return render_template("auth/signup.html", redirect_to=target, full_name="", email="")


@auth_bp.route("/confirm/<token>")
def confirm(token):
    try:
        confirm_email(db.session, token)
    except AuthError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("auth.signin"))

    flash("Your email address has been confirmed.", "success")
    if current_user.is_authenticated:
        return redirect(url_for("treks.index"))
    return redirect(url_for("auth.signin"))


#-------------------------------------------------------
# Sign out
@auth_bp.route("/signout")
@login_required
def signout():
    logout_user()
    flash("You have been signed out.", "info")
    return redirect(url_for("treks.index"))


#-------------------------------------------------------
# Google OAuth
@auth_bp.route("/oauth/google")
def oauth_google():
    target = _redirect_target()
    client = _google_client()
    if client is None:
        flash("Google sign-in is not configured.", "danger")
        return redirect(url_for("auth.signin", redirect=target))

    session[OAUTH_REDIRECT_KEY] = target
    return client.authorize_redirect(url_for("auth.oauth_google_callback", _external=True))


@auth_bp.route("/oauth/google/callback")
def oauth_google_callback():
    target = safe_redirect_target(session.pop(OAUTH_REDIRECT_KEY, None))
    client = _google_client()
    if client is None:
        flash("Google sign-in is not configured.", "danger")
        return redirect(url_for("auth.signin", redirect=target))

    try:
        token = client.authorize_access_token()
        info = token.get("userinfo") or client.userinfo(token=token)
    except OAuthError as exc:
        logger.warning("Google sign-in failed: %s", exc)
        flash("Sign in failed. Please try again.", "danger")
        return redirect(url_for("auth.signin", redirect=target))

    try:
        if not info.get("email_verified"):
            raise AuthError("Your Google account email is not verified.")
        user = sign_in_with_oauth(db.session, "google", info.get("sub"), info.get("email"), info.get("name"))
    except AuthError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("auth.signin", redirect=target))

    login_user(user)
    logger.info("User %s signed in with Google", user.id)
    flash("Welcome back! You have been signed in successfully.", "success")
    return redirect(target)
