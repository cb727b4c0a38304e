from __future__ import annotations

from typing import Optional

import requests

from postdesk.core.logging import get_structured_logger

WRITER_KEY_HEADER = "x-writer-key"

logger = get_structured_logger("postdesk.publish_client")


class PublishClientError(Exception):
    """Publishing did not succeed; the message is what the author sees."""


class PublishClient:
    """Caller side of ``POST /api/publish``."""

    def __init__(self, endpoint: str, writer_key: str, *, timeout: float = 30.0):
        self.endpoint = endpoint
        self.writer_key = writer_key
        self.timeout = timeout

    def publish(self, filename: str, content: str, message: Optional[str] = None) -> str:
        body = {"filename": filename, "content": content}
        if message:
            body["message"] = message
        try:
            resp = requests.post(
                self.endpoint,
                json=body,
                headers={"Content-Type": "application/json", WRITER_KEY_HEADER: self.writer_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("publish_client.transport_failed", extra={"endpoint": self.endpoint, "reason": str(exc)})
            raise PublishClientError(str(exc)) from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400:
            raise PublishClientError(data.get("error") or f"Publish failed with status {resp.status_code}")
        url = data.get("url")
        if not url:
            raise PublishClientError("Publish response did not include a URL")
        return url
