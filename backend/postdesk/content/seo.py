from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from postdesk.content.views import count_words, extract_headings
from postdesk.schemas.drafts import FaqEntry

TITLE_RANGE = (10, 60)
DESCRIPTION_RANGE = (50, 160)
MIN_WORDS = 300


@dataclass(frozen=True)
class SeoCheck:
    key: str
    label: str
    passed: bool
    detail: str


@dataclass(frozen=True)
class SeoReport:
    checks: list[SeoCheck] = field(default_factory=list)

    @property
    def score(self) -> int:
        return sum(1 for check in self.checks if check.passed)

    @property
    def max_score(self) -> int:
        return len(self.checks)

    @property
    def grade(self) -> str:
        if self.score >= 4:
            return "good"
        if self.score >= 2:
            return "fair"
        return "poor"

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "grade": self.grade,
            "checks": [
                {"key": c.key, "label": c.label, "passed": c.passed, "detail": c.detail}
                for c in self.checks
            ],
        }


def _within(value: int, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= value <= high


def score_seo(title: str, description: str, body: str, faqs: Iterable[FaqEntry]) -> SeoReport:
    """Five pass/fail checks, one point each. Advisory only."""
    words = count_words(body)
    h2_count = sum(1 for h in extract_headings(body) if h.level == 2)
    faq_count = sum(1 for faq in faqs if faq.question.strip())
    return SeoReport(
        checks=[
            SeoCheck("title", "標題", _within(len(title), TITLE_RANGE), f"{len(title)}/{TITLE_RANGE[1]}"),
            SeoCheck(
                "description",
                "描述",
                _within(len(description), DESCRIPTION_RANGE),
                f"{len(description)}/{DESCRIPTION_RANGE[1]}",
            ),
            SeoCheck("words", "字數", words >= MIN_WORDS, str(words)),
            SeoCheck("h2", "H2", h2_count > 0, f"{h2_count}個"),
            SeoCheck("faq", "FAQ", faq_count > 0, f"{faq_count}題"),
        ]
    )
