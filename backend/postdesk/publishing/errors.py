from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class PublishError(Exception):
    code: str
    message: str
    status_code: int

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(PublishError):
    def __init__(self, message: str = "GITHUB_TOKEN not configured"):
        super().__init__(code="configuration_error", message=message, status_code=500)


class AuthenticationError(PublishError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(code="unauthorized", message=message, status_code=401)


class ValidationError(PublishError):
    def __init__(self, message: str = "Missing filename or content"):
        super().__init__(code="validation_error", message=message, status_code=400)


class UpstreamError(PublishError):
    """The repository host refused the request. Status and message are its own."""

    def __init__(self, message: str, status_code: int):
        super().__init__(code="upstream_error", message=message, status_code=status_code)


class UnknownError(PublishError):
    def __init__(self, message: str):
        super().__init__(code="unknown_error", message=message, status_code=500)
