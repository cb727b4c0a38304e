"""
Turns a draft into the two artifacts a post needs: the markdown file that
gets committed to the content repository and the JSON-LD blocks for search
engines.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Optional

import yaml

from postdesk.core.config import settings
from postdesk.schemas.drafts import Draft

SCHEMA_CONTEXT = "https://schema.org"
FRONT_MATTER_FENCE = "---\n"


def publish_date(today: Optional[date] = None) -> str:
    return (today or datetime.now(timezone.utc).date()).isoformat()


def _quote(value: str) -> str:
    # YAML double-quoted scalar on one line; the body is never passed through here.
    return yaml.safe_dump(value, default_style='"', allow_unicode=True, width=float("inf")).rstrip("\n")


def to_markdown_document(draft: Draft, today: Optional[date] = None) -> str:
    lines = [
        "---",
        f"title: {_quote(draft.title)}",
        f"description: {_quote(draft.description)}",
        f"publishDate: {publish_date(today)}",
        f"category: {_quote(draft.category)}",
    ]
    tags = draft.tag_list()
    if tags:
        lines.append(f"tags: [{', '.join(_quote(tag) for tag in tags)}]")
    if draft.cover_image:
        lines.append(f"image: {_quote(draft.cover_image)}")
    faqs = draft.valid_faqs()
    if faqs:
        lines.append("faq:")
        for faq in faqs:
            lines.append(f"  - q: {_quote(faq.question)}")
            lines.append(f"    a: {_quote(faq.answer)}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + draft.body


def to_structured_data(draft: Draft, today: Optional[date] = None) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = [
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Article",
            "headline": draft.title,
            "description": draft.description,
            "author": {"@type": "Person", "name": settings.AUTHOR_NAME},
            "datePublished": publish_date(today),
        }
    ]
    faqs = draft.valid_faqs()
    if faqs:
        blocks.append(
            {
                "@context": SCHEMA_CONTEXT,
                "@type": "FAQPage",
                "mainEntity": [
                    {
                        "@type": "Question",
                        "name": faq.question,
                        "acceptedAnswer": {"@type": "Answer", "text": faq.answer},
                    }
                    for faq in faqs
                ],
            }
        )
    return blocks


def structured_data_json(draft: Draft, today: Optional[date] = None) -> str:
    return json.dumps(to_structured_data(draft, today), ensure_ascii=False, indent=2)


def read_front_matter(document: str) -> tuple[dict[str, Any], str]:
    """Split a post into its front-matter mapping and body.

    CRLF line endings are accepted. Raises ValueError when the document has
    no front-matter block or the block is not a YAML mapping.
    """
    document = document.replace("\r\n", "\n")
    if not document.startswith(FRONT_MATTER_FENCE):
        raise ValueError("document has no front-matter block")
    parts = document.split(FRONT_MATTER_FENCE, 2)
    if len(parts) < 3:
        raise ValueError("front-matter block is not closed")
    try:
        metadata = yaml.safe_load(parts[1]) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid front-matter: {exc}") from exc
    if not isinstance(metadata, dict):
        raise ValueError("front-matter must be a mapping")
    return metadata, parts[2].removeprefix("\n")
