import base64

import pytest
import requests

from postdesk.core.config import Settings
from postdesk.publishing.errors import ConfigurationError, UnknownError, UpstreamError, ValidationError
from postdesk.publishing.github import GitHubContentsClient
from postdesk.publishing.service import (
    PublishService,
    default_commit_message,
    post_url,
)
from tests.factories import FakeResponse


class FakeGitHub:
    """Records calls made through requests.get / requests.put."""

    def __init__(self, *, existing_sha=None, read_status=None, read_error=None, write_status=201, write_payload=None):
        self.existing_sha = existing_sha
        self.read_status = read_status
        self.read_error = read_error
        self.write_status = write_status
        self.write_payload = write_payload
        self.reads = []
        self.writes = []

    def get(self, url, headers=None, timeout=None):
        self.reads.append(url)
        if self.read_error:
            raise self.read_error
        if self.read_status:
            return FakeResponse(self.read_status, {"message": "Server Error"})
        if self.existing_sha is None:
            return FakeResponse(404, {"message": "Not Found"})
        return FakeResponse(200, {"path": url.split("/contents/")[1], "sha": self.existing_sha})

    def put(self, url, json=None, headers=None, timeout=None):
        self.writes.append({"url": url, "json": json})
        if self.write_status >= 400:
            return FakeResponse(self.write_status, self.write_payload)
        path = url.split("/contents/")[1]
        return FakeResponse(self.write_status, {"content": {"path": path, "sha": "new"}, "commit": {"sha": "c1"}})


@pytest.fixture
def service():
    client = GitHubContentsClient(token="t", owner="vega-create", repo="vega-note")
    return PublishService(
        client,
        posts_path="src/content/posts",
        branch="main",
        site_base_url="https://vega-note.com",
    )


def _install(monkeypatch, fake):
    monkeypatch.setattr("postdesk.publishing.github.requests.get", fake.get)
    monkeypatch.setattr("postdesk.publishing.github.requests.put", fake.put)


def test_helpers():
    assert default_commit_message("a.md") == "新增文章: a.md"
    assert post_url("my-post-ab12cd34.md", "https://vega-note.com/") == "https://vega-note.com/posts/my-post-ab12cd34/"
    assert post_url("notes.txt", "https://vega-note.com") == "https://vega-note.com/posts/notes.txt/"


def test_new_file_is_created_without_sha(monkeypatch, service):
    fake = FakeGitHub()
    _install(monkeypatch, fake)
    outcome = service.publish("my-post-ab12cd34.md", "---\ntitle: x\n---\n\nbody")
    assert outcome.created is True
    assert outcome.path == "src/content/posts/my-post-ab12cd34.md"
    assert outcome.url == "https://vega-note.com/posts/my-post-ab12cd34/"
    write = fake.writes[0]["json"]
    assert "sha" not in write
    assert write["branch"] == "main"
    assert write["message"] == "新增文章: my-post-ab12cd34.md"
    assert base64.b64decode(write["content"]).decode("utf-8") == "---\ntitle: x\n---\n\nbody"


def test_existing_file_is_updated_with_sha(monkeypatch, service):
    fake = FakeGitHub(existing_sha="abc123")
    _install(monkeypatch, fake)
    outcome = service.publish("a.md", "updated", message="edit a")
    assert outcome.created is False
    assert fake.writes[0]["json"]["sha"] == "abc123"
    assert fake.writes[0]["json"]["message"] == "edit a"
    assert outcome.to_payload() == {
        "success": True,
        "path": "src/content/posts/a.md",
        "url": "https://vega-note.com/posts/a/",
    }


def test_transient_read_failure_still_writes_as_create(monkeypatch, service):
    for fake in [FakeGitHub(read_status=500), FakeGitHub(read_error=requests.ConnectionError("reset"))]:
        _install(monkeypatch, fake)
        outcome = service.publish("a.md", "body")
        assert outcome.created is True
        assert "sha" not in fake.writes[0]["json"]


def test_upstream_rejection_passes_through(monkeypatch, service):
    fake = FakeGitHub(write_status=409, write_payload={"message": "a.md does not match"})
    _install(monkeypatch, fake)
    with pytest.raises(UpstreamError) as exc_info:
        service.publish("a.md", "body")
    assert exc_info.value.status_code == 409
    assert exc_info.value.to_payload() == {"error": "a.md does not match"}


def test_missing_fields_are_rejected_before_any_call(monkeypatch, service):
    fake = FakeGitHub()
    _install(monkeypatch, fake)
    for filename, content in [(None, "x"), ("a.md", None), ("", "x"), ("a.md", "")]:
        with pytest.raises(ValidationError):
            service.publish(filename, content)
    assert fake.reads == [] and fake.writes == []


def test_unexpected_failure_becomes_unknown_error(monkeypatch, service):
    fake = FakeGitHub()
    _install(monkeypatch, fake)

    def broken_put(*args, **kwargs):
        raise requests.Timeout("write timed out")

    monkeypatch.setattr("postdesk.publishing.github.requests.put", broken_put)
    with pytest.raises(UnknownError) as exc_info:
        service.publish("a.md", "body")
    assert exc_info.value.status_code == 500
    assert "write timed out" in exc_info.value.message


def test_read_fallback_is_logged(monkeypatch, service, caplog):
    import postdesk.publishing.service as service_module

    service_module.logger.addHandler(caplog.handler)
    try:
        _install(monkeypatch, FakeGitHub(read_status=503))
        service.publish("a.md", "body")
    finally:
        service_module.logger.removeHandler(caplog.handler)
    messages = [r.getMessage() for r in caplog.records]
    assert "publish.read_fallback" in messages
    assert "publish.completed" in messages


def test_from_settings_requires_token():
    with pytest.raises(ConfigurationError):
        PublishService.from_settings(Settings(_env_file=None, GITHUB_TOKEN=None))


def test_from_settings_wires_repository():
    cfg = Settings(
        _env_file=None,
        GITHUB_TOKEN="t",
        REPO_OWNER="me",
        REPO_NAME="blog",
        POSTS_PATH="/content/posts/",
        SITE_BASE_URL="https://example.com/",
    )
    svc = PublishService.from_settings(cfg)
    assert svc.target_path("a.md") == "content/posts/a.md"
    assert svc.client.contents_url("x.md").endswith("/repos/me/blog/contents/x.md")
    assert svc.site_base_url == "https://example.com"
