"""Services module: configuration, errors, logging and external collaborators."""

from .config import Settings
from .errors import (
    ConfigurationError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    StoreError,
    StudyRoomError,
    UpstreamError,
)

__all__ = [
    "ConfigurationError",
    "NotFoundError",
    "PaymentRequiredError",
    "RateLimitError",
    "Settings",
    "StoreError",
    "StudyRoomError",
    "UpstreamError",
]
