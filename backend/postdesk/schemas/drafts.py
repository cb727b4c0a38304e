from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class FaqEntry(BaseModel):
    question: str = ""
    answer: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.question.strip() and self.answer.strip())


class Draft(BaseModel):
    title: str = ""
    description: str = ""
    body: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None
    faqs: List[FaqEntry] = Field(default_factory=lambda: [FaqEntry()])
    slug: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tag_string(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("cover_image", mode="before")
    @classmethod
    def _blank_cover_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def tag_list(self) -> list[str]:
        tags: list[str] = []
        for raw in self.tags:
            tags.extend(part.strip() for part in str(raw).split(","))
        return [tag for tag in tags if tag]

    def valid_faqs(self) -> list[FaqEntry]:
        return [faq for faq in self.faqs if faq.is_valid]


class HeadingRead(BaseModel):
    level: int
    text: str


class SeoCheckRead(BaseModel):
    key: str
    label: str
    passed: bool
    detail: str


class SeoReportRead(BaseModel):
    score: int
    max_score: int
    grade: str
    checks: List[SeoCheckRead]


class PreviewRead(BaseModel):
    slug: Optional[str]
    html: str
    headings: List[HeadingRead]
    word_count: int
    seo: SeoReportRead
    markdown: str
    structured_data: list
    search_title: str
    search_url: str


class CategoryCreate(BaseModel):
    name: str


class CategoryList(BaseModel):
    categories: List[str]
