from extensions import db

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    trek_id = db.Column(db.Integer, db.ForeignKey("treks.id", ondelete="SET NULL"))

    booking_date = db.Column(db.DateTime, server_default=db.func.now())
    trek_date = db.Column(db.Date)
    total_participants = db.Column(db.Integer, nullable=False, default=1)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    # free text; changed out-of-band
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    user = db.relationship("User", back_populates="bookings")
    trek = db.relationship("Trek", back_populates="bookings")
    participants = db.relationship(
        "Participant",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="Participant.id",
    )
