from postdesk.publishing.errors import (
    AuthenticationError,
    ConfigurationError,
    PublishError,
    UnknownError,
    UpstreamError,
    ValidationError,
)
from postdesk.publishing.service import PublishOutcome, PublishService


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "PublishError",
    "PublishOutcome",
    "PublishService",
    "UnknownError",
    "UpstreamError",
    "ValidationError",
]
