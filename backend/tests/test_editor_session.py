import pytest

from postdesk.content.categories import CategoryStore, MemoryBackend
from postdesk.content.session import INITIAL_BODY, EditorSession, PublishResult
from postdesk.publishing.client import PublishClientError


class FakePublisher:
    def __init__(self, url="https://vega-note.com/posts/x/", error=None):
        self.url = url
        self.error = error
        self.calls = []

    def publish(self, filename, content, message=None):
        self.calls.append({"filename": filename, "content": content, "message": message})
        if self.error:
            raise self.error
        return self.url


def _session(publisher=None, categories=("AI", "行銷", "開發")):
    return EditorSession(CategoryStore(MemoryBackend(), categories), publisher=publisher)


def test_new_session_starts_from_template():
    session = _session()
    assert session.draft.body == INITIAL_BODY
    assert session.draft.category == "AI"
    assert session.slug == "untitled"
    assert session.filename == "untitled.md"
    assert len(session.draft.faqs) == 1


def test_slug_is_generated_once_and_frozen():
    session = _session()
    session.set_title("Hello World")
    slug = session.slug
    assert slug.startswith("hello-world-")
    session.set_title("Completely different")
    assert session.slug == slug
    session.set_title("")
    assert session.slug == slug


def test_empty_title_does_not_generate_slug():
    session = _session()
    session.set_title("")
    assert session.draft.slug is None


def test_field_setters():
    session = _session()
    session.set_description("desc")
    session.set_tags("a, b")
    session.set_cover_image("  ")
    assert session.draft.description == "desc"
    assert session.draft.tag_list() == ["a", "b"]
    assert session.draft.cover_image is None
    session.set_cover_image(" https://img/x.png ")
    assert session.draft.cover_image == "https://img/x.png"


def test_select_category_must_exist():
    session = _session()
    session.select_category("行銷")
    assert session.draft.category == "行銷"
    with pytest.raises(ValueError):
        session.select_category("missing")


def test_removing_selected_category_reselects_first():
    session = _session()
    session.select_category("行銷")
    assert session.remove_category("行銷") is True
    assert session.draft.category == "AI"


def test_add_category_then_select():
    session = _session()
    assert session.add_category("旅行") is True
    session.select_category("旅行")
    assert session.draft.category == "旅行"


def test_faq_builder_keeps_at_least_one_entry():
    session = _session()
    assert session.remove_faq(0) is False
    session.add_faq()
    session.update_faq(1, "question", "Q?")
    session.update_faq(1, "answer", "A.")
    assert session.remove_faq(0) is True
    assert len(session.draft.faqs) == 1
    assert session.draft.faqs[0].question == "Q?"
    with pytest.raises(ValueError):
        session.update_faq(0, "slug", "nope")


def test_insert_at_cursor_replaces_selection():
    session = _session()
    session.set_body("hello world")
    cursor = session.insert_at_cursor("there", 6, 11)
    assert session.draft.body == "hello there"
    assert cursor == 11


def test_insert_at_cursor_clamps_offsets():
    session = _session()
    session.set_body("abc")
    cursor = session.insert_at_cursor("!", 99)
    assert session.draft.body == "abc!"
    assert cursor == 4


def test_toolbar_inserts_snippets():
    session = _session()
    session.set_body("")
    session.apply_toolbar("h2", 0)
    assert session.draft.body == "\n## "
    session.set_body("x")
    session.apply_toolbar("link", 1)
    assert session.draft.body == "x[文字](https://)"
    with pytest.raises(ValueError):
        session.apply_toolbar("table", 0)


def test_derived_views_follow_body():
    session = _session()
    session.set_title("A title")
    session.set_body("## One\n\nhello world")
    assert [h.text for h in session.headings()] == ["One"]
    assert session.word_count() == 3
    assert session.preview_html().startswith("<h2>One</h2>")
    assert session.seo().max_score == 5
    assert session.markdown().startswith('---\ntitle: "A title"\n')
    assert session.structured_data()[0]["headline"] == "A title"


def test_publish_requires_title():
    publisher = FakePublisher()
    session = _session(publisher)
    result = session.publish()
    assert result == PublishResult(ok=False, message="請輸入標題")
    assert publisher.calls == []


def test_publish_success_sends_filename_markdown_and_message():
    publisher = FakePublisher(url="https://vega-note.com/posts/p/")
    session = _session(publisher)
    session.set_title("My Post")
    result = session.publish()
    assert result.ok is True
    assert result.url == "https://vega-note.com/posts/p/"
    assert result.message == "✅ 已發佈！"
    call = publisher.calls[0]
    assert call["filename"] == session.filename
    assert call["content"] == session.markdown()
    assert call["message"] == "新增文章: My Post"
    assert session.publishing is False


def test_publish_failure_surfaces_error_message():
    session = _session(FakePublisher(error=PublishClientError("Unauthorized")))
    session.set_title("My Post")
    result = session.publish()
    assert result.ok is False
    assert result.message == "❌ Unauthorized"
    assert session.publishing is False
    session.dismiss_result()
    assert session.publish_result is None


def test_publish_while_in_flight_is_refused():
    publisher = FakePublisher()
    session = _session(publisher)
    session.set_title("My Post")
    session.publishing = True
    assert session.publish().message == "發佈中..."
    assert publisher.calls == []


def test_publish_without_client_raises():
    session = _session()
    session.set_title("My Post")
    with pytest.raises(RuntimeError):
        session.publish()


def test_republish_uses_same_filename():
    publisher = FakePublisher()
    session = _session(publisher)
    session.set_title("First")
    session.publish()
    session.set_title("First, edited")
    session.publish()
    assert publisher.calls[0]["filename"] == publisher.calls[1]["filename"]


def test_new_draft_resets_but_keeps_category():
    session = _session(FakePublisher())
    session.select_category("開發")
    session.set_title("Old")
    session.publish()
    session.new_draft()
    assert session.draft.title == ""
    assert session.draft.slug is None
    assert session.draft.category == "開發"
    assert session.publish_result is None
