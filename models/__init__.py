from .user import User
from .profile import Profile
from .trek import Trek
from .booking import Booking
from .participant import Participant
from .voucher import Voucher


__all__ = ["User", "Profile", "Trek", "Booking", "Participant", "Voucher"]
