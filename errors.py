class TrekbookError(Exception):
    """Base class for errors the views turn into flashes or redirects."""


class ConfigError(TrekbookError):
    pass


class AuthError(TrekbookError):
    pass


class FetchError(TrekbookError):
    pass


class NotFound(TrekbookError):
    pass


class ValidationError(TrekbookError):
    def __init__(self, message, index=None, field=None):
        super().__init__(message)
        self.index = index
        self.field = field


class BookingFailed(TrekbookError):
    pass


class ProfileSaveFailed(TrekbookError):
    pass
