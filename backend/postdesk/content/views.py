"""
Derived views of a draft body: headings, word count and the preview HTML.

All of these are pure text transforms recomputed from the markdown on every
edit. The preview renderer is deliberately small: it understands the handful
of constructs the editor toolbar inserts and nothing else. Its output is
inserted into the page as-is because the author is the only content source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEADING_RE = re.compile(r"^(#{2,3})\s+(.+)")
_FRONT_MATTER_RE = re.compile(r"\A---[\s\S]*?---")
_MARKDOWN_NOISE_RE = re.compile(r"[#*\->`\[\]()]")
_CJK_RE = re.compile(r"[\u4e00-\u9fff]")

_INLINE_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"^### (.+)$", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"^## (.+)$", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
    (re.compile(r"`(.+?)`"), r"<code>\1</code>"),
    (re.compile(r"!\[([^\]]*)\]\(([^)]+)\)"), r'<img src="\2" alt="\1" />'),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), r'<a href="\2" target="_blank">\1</a>'),
    (re.compile(r"^- (.+)$", re.MULTILINE), r'<li class="bullet">\1</li>'),
    (re.compile(r"^(\d+)\. (.+)$", re.MULTILINE), r'<li class="numbered">\2</li>'),
)

_BLOCK_PREFIXES = ("<h", "<li", "<img")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


def extract_headings(markdown: str) -> list[Heading]:
    headings: list[Heading] = []
    for line in markdown.split("\n"):
        match = _HEADING_RE.match(line)
        if not match:
            continue
        text = match.group(2).strip()
        if text:
            headings.append(Heading(level=len(match.group(1)), text=text))
    return headings


def count_words(text: str) -> int:
    """Count CJK ideographs one each plus whitespace-separated latin tokens."""
    if not text:
        return 0
    clean = _FRONT_MATTER_RE.sub("", text, count=1)
    clean = _MARKDOWN_NOISE_RE.sub("", clean)
    cjk = len(_CJK_RE.findall(clean))
    latin = sum(1 for token in clean.split() if not _CJK_RE.search(token))
    return cjk + latin


def render_markdown(markdown: str) -> str:
    html = markdown
    for pattern, replacement in _INLINE_RULES:
        html = pattern.sub(replacement, html)

    blocks: list[str] = []
    for block in html.split("\n\n"):
        if block.startswith(_BLOCK_PREFIXES):
            blocks.append(block)
        elif block.strip():
            blocks.append(f"<p>{block}</p>")
    return "\n".join(blocks)
