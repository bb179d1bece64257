"""Error taxonomy for StudyRoom services.

Every error carries the HTTP status it maps to at the service boundary,
where it is rendered as ``{"error": message}``.
"""

from typing import Optional


class StudyRoomError(Exception):
    """Base class for failures surfaced to callers."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(StudyRoomError):
    """A required credential or endpoint is not configured."""


class NotFoundError(StudyRoomError):
    """A referenced record does not exist in the store."""


class StoreError(StudyRoomError):
    """The hosted record store rejected a request or was unreachable."""


class UpstreamError(StudyRoomError):
    """The AI completion gateway failed."""


class RateLimitError(UpstreamError):
    status_code = 429


class PaymentRequiredError(UpstreamError):
    status_code = 402
