"""
Minimal client for the GitHub repository contents API.

Only the two calls publishing needs: read a file's metadata and create or
update a file. Responses are turned into tagged results instead of being
poked at as loose JSON, and ``sha`` is never assumed to be present.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Generic, Literal, Optional, TypeVar, Union
from urllib.parse import quote

import requests

from postdesk.publishing.errors import UpstreamError

T = TypeVar("T")

GITHUB_ACCEPT = "application/vnd.github.v3+json"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class Err:
    error: UpstreamError
    ok: Literal[False] = False


Result = Union[Ok[T], Err]


@dataclass(frozen=True)
class RemoteFile:
    path: str
    sha: Optional[str] = None


@dataclass(frozen=True)
class WrittenFile:
    path: Optional[str]
    sha: Optional[str] = None
    commit_sha: Optional[str] = None


def encode_content(content: str) -> str:
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def _json_or_none(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _upstream_error(resp) -> UpstreamError:
    body = _json_or_none(resp)
    message = None
    if isinstance(body, dict):
        message = body.get("message")
    if not message:
        message = getattr(resp, "reason", None) or f"GitHub responded with status {resp.status_code}"
    return UpstreamError(str(message), resp.status_code)


class GitHubContentsClient:
    def __init__(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
    ):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{quote(path.strip('/'), safe='/')}"

    def _headers(self, *, json_body: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": GITHUB_ACCEPT,
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def read_file(self, path: str) -> Result[RemoteFile]:
        try:
            resp = requests.get(self.contents_url(path), headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            return Err(UpstreamError(f"GitHub read failed: {exc}", 502))

        if resp.status_code >= 400:
            return Err(_upstream_error(resp))

        body = _json_or_none(resp)
        if not isinstance(body, dict):
            return Err(UpstreamError("GitHub returned an unexpected contents body", resp.status_code))
        sha = body.get("sha")
        return Ok(RemoteFile(path=body.get("path") or path, sha=sha if isinstance(sha, str) and sha else None))

    def write_file(
        self,
        path: str,
        content: str,
        *,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> Result[WrittenFile]:
        """Create ``path``, or update it when ``sha`` is given.

        Transport failures raise; only answers from GitHub become results.
        """
        payload: dict[str, Any] = {
            "message": message,
            "content": encode_content(content),
            "branch": branch,
        }
        if sha:
            payload["sha"] = sha

        resp = requests.put(
            self.contents_url(path),
            json=payload,
            headers=self._headers(json_body=True),
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            return Err(_upstream_error(resp))

        body = _json_or_none(resp)
        content_info = body.get("content") if isinstance(body, dict) else None
        commit_info = body.get("commit") if isinstance(body, dict) else None
        if not isinstance(content_info, dict):
            content_info = {}
        if not isinstance(commit_info, dict):
            commit_info = {}
        return Ok(
            WrittenFile(
                path=content_info.get("path"),
                sha=content_info.get("sha"),
                commit_sha=commit_info.get("sha"),
            )
        )
