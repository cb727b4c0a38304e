from __future__ import annotations

from functools import lru_cache
from typing import Optional
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import HTMLResponse

from postdesk.api.editor_page import render_editor_page
from postdesk.content.categories import CategoryStore, JsonFileBackend, LastCategoryError
from postdesk.content.seo import score_seo
from postdesk.content.serializer import to_markdown_document, to_structured_data
from postdesk.content.views import count_words, extract_headings, render_markdown
from postdesk.core.config import settings
from postdesk.core.utils.slug import generate_slug
from postdesk.publishing.service import check_writer_key
from postdesk.schemas.drafts import CategoryCreate, CategoryList, Draft, PreviewRead


router = APIRouter(tags=["editor"])


@lru_cache(maxsize=1)
def get_category_store() -> CategoryStore:
    return CategoryStore(JsonFileBackend(settings.CATEGORIES_FILE), settings.DEFAULT_CATEGORIES)


def require_writer_key(x_writer_key: Optional[str] = Header(default=None)) -> None:
    check_writer_key(x_writer_key, settings.WRITER_KEY)


def _site_host() -> str:
    return urlsplit(settings.SITE_BASE_URL).netloc or settings.SITE_BASE_URL


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
@router.get("/editor", response_class=HTMLResponse)
def editor_page():
    return HTMLResponse(render_editor_page(site_name=settings.SITE_NAME))


@router.post("/api/preview", response_model=PreviewRead)
def preview_draft(draft: Draft):
    slug = draft.slug
    if not slug and draft.title:
        slug = generate_slug(draft.title)
    draft.slug = slug
    return {
        "slug": slug,
        "html": render_markdown(draft.body),
        "headings": [{"level": h.level, "text": h.text} for h in extract_headings(draft.body)],
        "word_count": count_words(draft.body),
        "seo": score_seo(draft.title, draft.description, draft.body, draft.faqs).to_dict(),
        "markdown": to_markdown_document(draft),
        "structured_data": to_structured_data(draft),
        "search_title": f"{draft.title or '文章標題'} | {settings.SITE_NAME}",
        "search_url": f"{_site_host()}/posts/{slug or 'untitled'}/",
    }


@router.get("/api/categories", response_model=CategoryList)
def list_categories(store: CategoryStore = Depends(get_category_store)):
    return {"categories": store.categories}


@router.post(
    "/api/categories",
    response_model=CategoryList,
    dependencies=[Depends(require_writer_key)],
)
def add_category(payload: CategoryCreate, store: CategoryStore = Depends(get_category_store)):
    if not payload.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category name is required")
    store.add(payload.name)
    return {"categories": store.categories}


@router.delete(
    "/api/categories/{name}",
    response_model=CategoryList,
    dependencies=[Depends(require_writer_key)],
)
def remove_category(name: str, store: CategoryStore = Depends(get_category_store)):
    try:
        removed = store.remove(name)
    except LastCategoryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return {"categories": store.categories}
