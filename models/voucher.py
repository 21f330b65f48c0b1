from datetime import date
from extensions import db


class Voucher(db.Model):
    __tablename__ = "vouchers"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"))
    code = db.Column(db.String(50), nullable=False)

    # one of the two is set
    discount_percentage = db.Column(db.Integer)
    discount_amount = db.Column(db.Numeric(10, 2))

    valid_until = db.Column(db.Date)
    is_used = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    user = db.relationship("User", back_populates="vouchers")

    def is_expired(self, today=None):
        if self.valid_until is None:
            return False
        return self.valid_until < (today or date.today())
