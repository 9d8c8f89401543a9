"""Exceptions raised by the society admin core.

Each error carries the HTTP status the API functions answer with, so the
request handlers can map any of them to a response in one place.
"""


class SocietyError(Exception):
    """Base class for all society admin errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthorizedError(SocietyError):
    """Missing or wrong admin credential."""

    status_code = 401

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message)


class InvalidRequestError(SocietyError):
    """Required input missing or malformed."""

    status_code = 400


class EventNotFoundError(SocietyError):
    """Referenced event is not in the events collection."""

    status_code = 404

    def __init__(self, event_id: str, message: str | None = None):
        self.event_id = event_id
        super().__init__(message or f'Event not found: {event_id}')


class EventAlreadyFinalizedError(SocietyError):
    """Event has already been finalized."""

    # The admin UI treats this as a bad request rather than a 409
    status_code = 400

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__('This event has already been finalized.')


class StoreError(SocietyError):
    """Read or commit against the versioned store failed."""

    status_code = 500
