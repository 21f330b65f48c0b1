from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    full_name = db.Column(db.String(150))
    password_hash = db.Column(db.String(255))  # null for OAuth-only accounts

    oauth_provider = db.Column(db.String(30))
    oauth_subject = db.Column(db.String(255))
    email_confirmed_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    __table_args__ = (
        db.UniqueConstraint("oauth_provider", "oauth_subject", name="uq_users_oauth_identity"),
    )

    profile = db.relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    bookings = db.relationship("Booking", back_populates="user", lazy=True)
    vouchers = db.relationship("Voucher", back_populates="user", lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def email_confirmed(self):
        return self.email_confirmed_at is not None

    @property
    def display_name(self):
        return self.full_name or self.email
