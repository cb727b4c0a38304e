"""
State of one editing session.

Holds the draft, the author's category store, the toolbar insertions and the
publish flow. The slug is computed the first time the title becomes non-empty
and then kept, so republishing after a title tweak updates the same file
instead of creating a new one.

The editor page script (`postdesk.api.editor_page`) runs the same flow in the
browser: slug kept after the first non-empty title, then the title and
in-flight guards. Both take their commit message and notice texts from
NOTICES.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from postdesk.content.categories import CategoryStore
from postdesk.content.seo import SeoReport, score_seo
from postdesk.content.serializer import to_markdown_document, to_structured_data
from postdesk.content.views import Heading, count_words, extract_headings, render_markdown
from postdesk.core.utils.slug import generate_slug
from postdesk.publishing.client import PublishClient, PublishClientError
from postdesk.schemas.drafts import Draft, FaqEntry

INITIAL_BODY = """## 前言

在這裡寫你的開場白...

## 第一個重點

內容...

## 第二個重點

內容...

## 結語

總結你的想法..."""

TOOLBAR_SNIPPETS = {
    "h2": "\n## ",
    "h3": "\n### ",
    "bold": "****",
    "italic": "**",
    "link": "[文字](https://)",
    "image": "![描述](圖片URL)",
    "bullet": "\n- ",
    "code": "\n```\n\n```\n",
}

FAQ_FIELDS = {"question", "answer"}

NOTICES = {
    "missing_title": "請輸入標題",
    "publishing": "發佈中...",
    "published": "✅ 已發佈！",
    "failed": "❌ ",
    "commit": "新增文章: ",
}


@dataclass(frozen=True)
class PublishResult:
    ok: bool
    message: str
    url: Optional[str] = None


class EditorSession:
    def __init__(self, categories: CategoryStore, publisher: Optional[PublishClient] = None):
        self.categories = categories
        self.publisher = publisher
        self.publishing = False
        self.publish_result: Optional[PublishResult] = None
        self.draft = self._blank_draft()

    def _blank_draft(self) -> Draft:
        return Draft(body=INITIAL_BODY, category=self.categories.categories[0])

    @property
    def slug(self) -> str:
        return self.draft.slug or "untitled"

    @property
    def filename(self) -> str:
        return f"{self.slug}.md"

    # Field edits

    def set_title(self, title: str) -> None:
        self.draft.title = title
        if title and not self.draft.slug:
            self.draft.slug = generate_slug(title)

    def set_description(self, description: str) -> None:
        self.draft.description = description

    def set_body(self, body: str) -> None:
        self.draft.body = body

    def set_tags(self, tags: str) -> None:
        self.draft.tags = [tags] if tags else []

    def set_cover_image(self, url: str) -> None:
        self.draft.cover_image = url.strip() or None

    def select_category(self, name: str) -> None:
        if name not in self.categories:
            raise ValueError(f"Unknown category: {name}")
        self.draft.category = name

    def add_category(self, name: str) -> bool:
        return self.categories.add(name)

    def remove_category(self, name: str) -> bool:
        removed = self.categories.remove(name)
        if removed and self.draft.category == name:
            self.draft.category = self.categories.categories[0]
        return removed

    # FAQ builder

    def add_faq(self) -> None:
        self.draft.faqs.append(FaqEntry())

    def remove_faq(self, index: int) -> bool:
        if len(self.draft.faqs) <= 1:
            return False
        del self.draft.faqs[index]
        return True

    def update_faq(self, index: int, field: str, value: str) -> None:
        if field not in FAQ_FIELDS:
            raise ValueError(f"Unknown FAQ field: {field}")
        setattr(self.draft.faqs[index], field, value)

    # Toolbar

    def insert_at_cursor(self, text: str, start: int, end: Optional[int] = None) -> int:
        """Replace the selection with ``text``; returns the new cursor offset."""
        body = self.draft.body
        start = max(0, min(start, len(body)))
        end = start if end is None else max(start, min(end, len(body)))
        self.draft.body = body[:start] + text + body[end:]
        return start + len(text)

    def apply_toolbar(self, action: str, start: int, end: Optional[int] = None) -> int:
        try:
            snippet = TOOLBAR_SNIPPETS[action]
        except KeyError:
            raise ValueError(f"Unknown toolbar action: {action}") from None
        return self.insert_at_cursor(snippet, start, end)

    # Derived views

    def headings(self) -> list[Heading]:
        return extract_headings(self.draft.body)

    def word_count(self) -> int:
        return count_words(self.draft.body)

    def preview_html(self) -> str:
        return render_markdown(self.draft.body)

    def seo(self) -> SeoReport:
        d = self.draft
        return score_seo(d.title, d.description, d.body, d.faqs)

    def markdown(self) -> str:
        return to_markdown_document(self.draft)

    def structured_data(self) -> list[dict]:
        return to_structured_data(self.draft)

    # Publishing

    def publish(self) -> PublishResult:
        if not self.draft.title.strip():
            self.publish_result = PublishResult(ok=False, message=NOTICES["missing_title"])
            return self.publish_result
        if self.publishing:
            return PublishResult(ok=False, message=NOTICES["publishing"])
        if self.publisher is None:
            raise RuntimeError("No publish client configured for this session")

        self.publishing = True
        self.publish_result = None
        try:
            url = self.publisher.publish(
                self.filename,
                self.markdown(),
                message=NOTICES["commit"] + self.draft.title,
            )
            self.publish_result = PublishResult(ok=True, message=NOTICES["published"], url=url)
        except PublishClientError as exc:
            self.publish_result = PublishResult(ok=False, message=f"{NOTICES['failed']}{exc}")
        finally:
            self.publishing = False
        return self.publish_result

    def dismiss_result(self) -> None:
        self.publish_result = None

    def new_draft(self) -> None:
        category = self.draft.category
        self.draft = self._blank_draft()
        if category in self.categories:
            self.draft.category = category
        self.publish_result = None
