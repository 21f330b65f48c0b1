import logging
from datetime import datetime

from flask import Flask, flash, redirect, url_for

import config
import security
from extensions import db, mail, migrate, login_manager, oauth
from services.catalog import difficulty_badge
from services.dashboard_data import format_money, status_badge, voucher_discount_label

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)


def create_app(test_config=None):
    """
    Build the application. Without `test_config` settings come from the
    environment and missing required values raise ConfigError.
    """
    app = Flask(__name__)
    if test_config is None:
        app.config.update(config.load_config())
    else:
        app.config.update(config.defaults())
        app.config.update(test_config)

    _configure_logging(app)

    # extensions
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    login_manager.init_app(app)
    oauth.init_app(app)
    security.init_app(app)

    if app.config.get("GOOGLE_CLIENT_ID") and app.config.get("GOOGLE_CLIENT_SECRET"):
        oauth.register(
            name="google",
            client_id=app.config["GOOGLE_CLIENT_ID"],
            client_secret=app.config["GOOGLE_CLIENT_SECRET"],
            server_metadata_url=GOOGLE_DISCOVERY_URL,
            client_kwargs={"scope": "openid email profile"},
        )

    # models are imported once db is bound
    from models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        flash("Please sign in to continue.", "info")
        return redirect(url_for("auth.signin", redirect=security.return_path()))

    from blueprints.auth.routes import auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from blueprints.treks.routes import treks_bp
    app.register_blueprint(treks_bp)

    from blueprints.booking.routes import booking_bp
    app.register_blueprint(booking_bp)

    from blueprints.dashboard.routes import dashboard_bp
    app.register_blueprint(dashboard_bp)

    app.add_template_filter(format_money, "money")
    app.add_template_filter(difficulty_badge, "difficulty_badge")
    app.add_template_filter(status_badge, "status_badge")
    app.add_template_filter(voucher_discount_label, "voucher_label")

    @app.context_processor
    def inject_year():
        return {"year": datetime.now().year}

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
