from extensions import db


class Trek(db.Model):
    __tablename__ = "treks"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    duration = db.Column(db.String(50))
    difficulty = db.Column(db.String(50))
    price = db.Column(db.Numeric(10, 2))

    overview = db.Column(db.Text)
    highlights = db.Column(db.JSON)          # list of strings
    who_can_participate = db.Column(db.Text)
    itinerary = db.Column(db.JSON)           # [{"day": ..., "activity": ...}, ...]
    how_to_reach = db.Column(db.Text)
    cost_terms = db.Column(db.Text)
    trek_essentials = db.Column(db.JSON)     # list of strings

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    bookings = db.relationship("Booking", back_populates="trek", lazy=True)
