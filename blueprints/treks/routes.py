import logging

from flask import Blueprint, render_template, request, redirect, url_for, current_app

from errors import FetchError, NotFound
from extensions import db
from services.catalog import CatalogState, filter_treks, get_trek, itinerary_days, list_treks

logger = logging.getLogger(__name__)

treks_bp = Blueprint("treks", __name__, template_folder="../../templates")


#-------------------------------------------------------
# Trek catalog
@treks_bp.route("/")
def index():
    search_term = request.args.get("q", "").strip()
    try:
        treks = list_treks(db.session, limit=current_app.config.get("TREK_LIST_LIMIT", 50))
        state = CatalogState.loaded(filter_treks(treks, search_term))
    except FetchError as exc:
        logger.exception("Error fetching treks")
        state = CatalogState.failed(exc)

    return render_template("index.html", state=state, search_term=search_term)


#-------------------------------------------------------
# Trek detail
@treks_bp.route("/trek/<int:trek_id>")
def trek_detail(trek_id):
    try:
        trek = get_trek(db.session, trek_id)
    except NotFound:
        logger.warning("Trek %s not found, redirecting to catalog", trek_id)
        return redirect(url_for("treks.index"))
    except FetchError:
        logger.exception("Error fetching trek %s", trek_id)
        return redirect(url_for("treks.index"))

    return render_template("trek_detail.html", trek=trek, itinerary=itinerary_days(trek.itinerary))
