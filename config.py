import os
from dotenv import load_dotenv

from errors import ConfigError

REQUIRED_SETTINGS = ("SECRET_KEY", "DATABASE_URL")


def _env_bool(name, default=False):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name, default):
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name):
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def defaults():
    """Settings that do not depend on the environment."""
    return {
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "MAIL_SERVER": "smtp.gmail.com",
        "MAIL_PORT": 587,
        "MAIL_USE_TLS": True,
        "MAIL_USERNAME": None,
        "MAIL_PASSWORD": None,
        "MAIL_DEFAULT_SENDER": "no-reply@trekbook.local",
        "GOOGLE_CLIENT_ID": None,
        "GOOGLE_CLIENT_SECRET": None,
        "REQUIRE_EMAIL_CONFIRMATION": False,
        "EMAIL_CONFIRM_MAX_AGE": 24 * 60 * 60,
        "TREK_LIST_LIMIT": 50,
        "ALLOWED_ORIGINS": [],
        "ALLOW_MISSING_ORIGIN": False,
        "ENABLE_HSTS": False,
        "LOG_LEVEL": "INFO",
    }


def load_config():
    """Read settings from the environment (and .env), failing on missing required values."""
    load_dotenv()

    missing = [name for name in REQUIRED_SETTINGS if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    settings = defaults()
    settings.update(
        SECRET_KEY=os.getenv("SECRET_KEY"),
        SQLALCHEMY_DATABASE_URI=os.getenv("DATABASE_URL"),
        MAIL_SERVER=os.getenv("MAIL_SERVER", settings["MAIL_SERVER"]),
        MAIL_PORT=_env_int("MAIL_PORT", settings["MAIL_PORT"]),
        MAIL_USE_TLS=_env_bool("MAIL_USE_TLS", True),
        MAIL_USERNAME=os.getenv("MAIL_USERNAME"),
        MAIL_PASSWORD=os.getenv("MAIL_PASSWORD"),
        MAIL_DEFAULT_SENDER=(
            os.getenv("MAIL_DEFAULT_SENDER") or os.getenv("MAIL_USERNAME") or settings["MAIL_DEFAULT_SENDER"]
        ),
        GOOGLE_CLIENT_ID=os.getenv("GOOGLE_CLIENT_ID"),
        GOOGLE_CLIENT_SECRET=os.getenv("GOOGLE_CLIENT_SECRET"),
        REQUIRE_EMAIL_CONFIRMATION=_env_bool("REQUIRE_EMAIL_CONFIRMATION"),
        EMAIL_CONFIRM_MAX_AGE=_env_int("EMAIL_CONFIRM_MAX_AGE", settings["EMAIL_CONFIRM_MAX_AGE"]),
        TREK_LIST_LIMIT=_env_int("TREK_LIST_LIMIT", settings["TREK_LIST_LIMIT"]),
        ALLOWED_ORIGINS=_env_list("ALLOWED_ORIGINS"),
        ALLOW_MISSING_ORIGIN=_env_bool("ALLOW_MISSING_ORIGIN"),
        ENABLE_HSTS=_env_bool("ENABLE_HSTS"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", settings["LOG_LEVEL"]).upper(),
    )
    return settings
