"""
Failure taxonomy shared by the stores and the HTTP layer.

Stores raise these; nothing is retried, they are logical errors rather
than transient I/O faults. ``main.py`` maps each class to a status code.
"""


class MarketplaceError(Exception):
    """Base class for every failure surfaced by the stores."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """Unknown merchant, user or booking id."""

    status_code = 404


class ValidationError(MarketplaceError):
    """Rejected input: empty service selection, bad price, bad guest count..."""

    status_code = 400


class InvalidStateTransition(MarketplaceError):
    """Status change requested on a booking that is no longer pending."""

    status_code = 409
