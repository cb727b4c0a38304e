"""
Create-or-update of a single post file in the content repository.

The operation is a read followed by a write. The read only exists to learn
the file's current ``sha``; when it fails for any reason the write goes out
as a create. If the file did exist, GitHub rejects that create (or any write
carrying a stale ``sha``) and the rejection is handed back to the caller
untouched. Nothing is retried here and nothing is serialized: two writers
racing on one filename are settled by GitHub's own version check.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from postdesk.core.config import Settings
from postdesk.core.logging import get_structured_logger
from postdesk.publishing.errors import (
    AuthenticationError,
    ConfigurationError,
    PublishError,
    UnknownError,
    ValidationError,
)
from postdesk.publishing.github import Err, GitHubContentsClient

MARKDOWN_SUFFIX = ".md"

logger = get_structured_logger("postdesk.publish")


@dataclass(frozen=True)
class PublishOutcome:
    path: Optional[str]
    url: str
    created: bool

    def to_payload(self) -> dict:
        return {"success": True, "path": self.path, "url": self.url}


def default_commit_message(filename: str) -> str:
    return f"新增文章: {filename}"


def post_url(filename: str, site_base_url: str) -> str:
    stem = filename[: -len(MARKDOWN_SUFFIX)] if filename.endswith(MARKDOWN_SUFFIX) else filename
    return f"{site_base_url.rstrip('/')}/posts/{stem}/"


def check_writer_key(provided: Optional[str], expected: Optional[str]) -> None:
    if not expected or not provided:
        raise AuthenticationError()
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError()


class PublishService:
    def __init__(
        self,
        client: GitHubContentsClient,
        *,
        posts_path: str,
        branch: str,
        site_base_url: str,
    ):
        self.client = client
        self.posts_path = posts_path.strip("/")
        self.branch = branch
        self.site_base_url = site_base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "PublishService":
        if not settings.GITHUB_TOKEN:
            raise ConfigurationError()
        client = GitHubContentsClient(
            token=settings.GITHUB_TOKEN,
            owner=settings.REPO_OWNER,
            repo=settings.REPO_NAME,
            api_url=settings.GITHUB_API_URL,
            timeout=settings.GITHUB_TIMEOUT_SECONDS,
        )
        return cls(
            client,
            posts_path=settings.POSTS_PATH,
            branch=settings.GITHUB_BRANCH,
            site_base_url=settings.SITE_BASE_URL,
        )

    def target_path(self, filename: str) -> str:
        return f"{self.posts_path}/{filename}" if self.posts_path else filename

    def current_sha(self, path: str) -> Optional[str]:
        result = self.client.read_file(path)
        if isinstance(result, Err):
            # Missing file and failed read look the same from here: write as new.
            logger.info(
                "publish.read_fallback",
                extra={
                    "path": path,
                    "upstream_status": result.error.status_code,
                    "reason": result.error.message,
                },
            )
            return None
        return result.value.sha

    def publish(self, filename: Optional[str], content: Optional[str], message: Optional[str] = None) -> PublishOutcome:
        if not filename or not content:
            raise ValidationError()
        try:
            return self._publish(filename, content, message)
        except PublishError:
            raise
        except Exception as exc:
            raise UnknownError(str(exc)) from exc

    def _publish(self, filename: str, content: str, message: Optional[str]) -> PublishOutcome:
        path = self.target_path(filename)
        sha = self.current_sha(path)

        result = self.client.write_file(
            path,
            content,
            message=message or default_commit_message(filename),
            branch=self.branch,
            sha=sha,
        )
        if isinstance(result, Err):
            logger.warning(
                "publish.write_rejected",
                extra={
                    "path": path,
                    "upstream_status": result.error.status_code,
                    "reason": result.error.message,
                    "had_sha": sha is not None,
                },
            )
            raise result.error

        outcome = PublishOutcome(
            path=result.value.path,
            url=post_url(filename, self.site_base_url),
            created=sha is None,
        )
        logger.info(
            "publish.completed",
            extra={"path": outcome.path, "url": outcome.url, "created": outcome.created},
        )
        return outcome
