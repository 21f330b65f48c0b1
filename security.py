"""
Request hardening shared by every blueprint: origin checks on state-changing
requests, response security headers and validation of `?redirect=` targets.
"""
import logging
from urllib.parse import urlparse

from flask import abort, current_app, request

logger = logging.getLogger(__name__)

UNSAFE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def _origin_of(url):
    try:
        parsed = urlparse(url)
    except ValueError:
        return ""
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return ""


def get_allowed_origins(req=None):
    """The request's own origin plus any configured ALLOWED_ORIGINS."""
    req = req or request
    allowed = [req.host_url.rstrip("/")]
    for origin in current_app.config.get("ALLOWED_ORIGINS") or []:
        if origin not in allowed:
            allowed.append(origin)
    return allowed


def is_csrf_valid(req=None):
    """
    Check Origin (or Referer when Origin is absent) of unsafe requests.

    Requests carrying neither header are rejected unless ALLOW_MISSING_ORIGIN
    is set.
    """
    req = req or request
    if req.method not in UNSAFE_METHODS:
        return True

    allowed = get_allowed_origins(req)
    origin = req.headers.get("Origin")
    if origin:
        return origin in allowed

    referer = req.headers.get("Referer")
    if referer:
        referer_origin = _origin_of(referer)
        return referer_origin in allowed if referer_origin else False

    return bool(current_app.config.get("ALLOW_MISSING_ORIGIN"))


def enforce_same_origin():
    if not is_csrf_valid():
        logger.warning("Rejected %s %s: cross-origin request", request.method, request.path)
        abort(403)


def build_csp():
    return (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "script-src 'self' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https:; "
        "font-src 'self' https://cdn.jsdelivr.net data:; "
        "frame-ancestors 'none'; "
        "base-uri 'self'; "
        "form-action 'self' https://accounts.google.com;"
    )


def apply_security_headers(response):
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("Content-Security-Policy", build_csp())
    if current_app.config.get("ENABLE_HSTS"):
        response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
    return response


def safe_redirect_target(value, default="/"):
    """Return `value` only when it is a path on this site, else `default`."""
    if not value:
        return default
    value = value.strip()
    if not value.startswith("/") or value.startswith("//") or "\\" in value:
        return default
    parsed = urlparse(value)
    if parsed.scheme or parsed.netloc:
        return default
    return value


def return_path(req=None, default="/"):
    """
    Where to send the user after signing in. POST-only routes cannot be
    revisited with a GET, so those fall back to the same-site page the form
    was posted from.
    """
    req = req or request
    if req.method == "GET":
        return safe_redirect_target(req.full_path.rstrip("?"), default)

    referrer = urlparse(req.referrer or "")
    if referrer.netloc != req.host:
        return default
    path = referrer.path + (f"?{referrer.query}" if referrer.query else "")
    return safe_redirect_target(path, default)


def init_app(app):
    app.before_request(enforce_same_origin)
    app.after_request(apply_security_headers)
