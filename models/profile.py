from extensions import db


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = db.Column(db.String(255))
    full_name = db.Column(db.String(150))
    phone_number = db.Column(db.String(30))
    address = db.Column(db.Text)
    avatar_url = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now())

    user = db.relationship("User", back_populates="profile")
