import pytest
import requests

from postdesk.publishing.client import WRITER_KEY_HEADER, PublishClient, PublishClientError
from tests.factories import FakeResponse

ENDPOINT = "http://127.0.0.1:8000/api/publish"


def test_publish_posts_body_and_returns_url(monkeypatch):
    seen = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        seen.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(200, {"success": True, "path": "p/a.md", "url": "https://vega-note.com/posts/a/"})

    monkeypatch.setattr("postdesk.publishing.client.requests.post", fake_post)
    url = PublishClient(ENDPOINT, "k", timeout=3).publish("a.md", "content", message="m")
    assert url == "https://vega-note.com/posts/a/"
    assert seen["url"] == ENDPOINT
    assert seen["json"] == {"filename": "a.md", "content": "content", "message": "m"}
    assert seen["headers"][WRITER_KEY_HEADER] == "k"
    assert seen["timeout"] == 3


def test_message_is_omitted_when_not_given(monkeypatch):
    seen = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        seen["json"] = json
        return FakeResponse(200, {"url": "u"})

    monkeypatch.setattr("postdesk.publishing.client.requests.post", fake_post)
    PublishClient(ENDPOINT, "k").publish("a.md", "content")
    assert "message" not in seen["json"]


def test_server_error_message_is_surfaced(monkeypatch):
    monkeypatch.setattr(
        "postdesk.publishing.client.requests.post",
        lambda *a, **k: FakeResponse(401, {"error": "Unauthorized"}),
    )
    with pytest.raises(PublishClientError, match="Unauthorized"):
        PublishClient(ENDPOINT, "bad").publish("a.md", "x")


def test_error_without_body_uses_status(monkeypatch):
    monkeypatch.setattr("postdesk.publishing.client.requests.post", lambda *a, **k: FakeResponse(502, None))
    with pytest.raises(PublishClientError, match="502"):
        PublishClient(ENDPOINT, "k").publish("a.md", "x")


def test_success_without_url_is_an_error(monkeypatch):
    monkeypatch.setattr("postdesk.publishing.client.requests.post", lambda *a, **k: FakeResponse(200, {"success": True}))
    with pytest.raises(PublishClientError):
        PublishClient(ENDPOINT, "k").publish("a.md", "x")


def test_transport_failure_is_wrapped(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr("postdesk.publishing.client.requests.post", boom)
    with pytest.raises(PublishClientError, match="refused"):
        PublishClient(ENDPOINT, "k").publish("a.md", "x")
