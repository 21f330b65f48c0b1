"""
Trek catalog and trek detail queries, plus the pure helpers the templates use
to present them.
"""
import logging
import re
from collections import namedtuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import load_only

from errors import FetchError, NotFound
from models import Trek

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50

STATE_LOADED = "loaded"
STATE_FAILED = "failed"

DIFFICULTY_BADGES = {
    "Easy": "bg-success",
    "Easy to Moderate": "bg-info text-dark",
    "Moderate": "bg-warning text-dark",
    "Moderate to Difficult": "bg-orange",
    "Difficult": "bg-danger",
    "Very Difficult": "bg-dark",
}
DEFAULT_BADGE = "bg-secondary"

ItineraryDay = namedtuple("ItineraryDay", ["label", "activity"])


class CatalogState:
    """What the catalog page renders: a loaded list or a failure to retry."""

    def __init__(self, status, treks=None, error=None):
        self.status = status
        self.treks = treks or []
        self.error = error

    @classmethod
    def loaded(cls, treks):
        return cls(STATE_LOADED, treks=treks)

    @classmethod
    def failed(cls, error):
        return cls(STATE_FAILED, error=str(error))

    @property
    def is_failed(self):
        return self.status == STATE_FAILED


def list_treks(session, limit=DEFAULT_LIST_LIMIT):
    try:
        return (
            session.query(Trek)
            .options(load_only(
                Trek.id, Trek.title, Trek.description, Trek.duration,
                Trek.difficulty, Trek.price, Trek.image_url,
            ))
            .order_by(Trek.id.asc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise FetchError("Could not load treks") from exc


def filter_treks(treks, term):
    if not term or not term.strip():
        return list(treks)
    needle = term.strip().lower()
    return [
        trek for trek in treks
        if needle in (trek.title or "").lower() or needle in (trek.description or "").lower()
    ]


def get_trek(session, trek_id):
    try:
        trek = session.get(Trek, trek_id)
    except SQLAlchemyError as exc:
        session.rollback()
        raise FetchError(f"Could not load trek {trek_id}") from exc
    if trek is None:
        raise NotFound(f"Trek {trek_id} does not exist")
    return trek


def humanize_day_label(label):
    # dayOne -> Day One
    spaced = re.sub(r"([A-Z])", r" \1", str(label)).strip()
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def itinerary_days(itinerary):
    """
    Normalize a stored itinerary into ordered (label, activity) pairs.

    The stored shape is a list of {"day", "activity"} objects. Pairs and older
    day -> activity mappings are accepted too and keep their stored order.
    """
    if not itinerary:
        return []

    if isinstance(itinerary, dict):
        entries = list(itinerary.items())
    else:
        entries = []
        for item in itinerary:
            if isinstance(item, dict):
                entries.append((item.get("day", ""), item.get("activity", "")))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                entries.append((item[0], item[1]))
            else:
                logger.warning("Skipping malformed itinerary entry: %r", item)

    return [ItineraryDay(humanize_day_label(day), activity or "") for day, activity in entries]


def difficulty_badge(difficulty):
    return DIFFICULTY_BADGES.get(difficulty or "", DEFAULT_BADGE)
