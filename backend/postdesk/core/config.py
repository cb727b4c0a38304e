# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.
# Secrets stay out of the code and out of the editor page.

import json
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Token for the GitHub contents API. Without it every publish
    # request fails with a configuration error.
    GITHUB_TOKEN: Optional[str] = None

    # Shared secret the editor sends in the x-writer-key header.
    WRITER_KEY: Optional[str] = None

    # Target content repository. Posts land under POSTS_PATH on GITHUB_BRANCH.
    GITHUB_API_URL: str = "https://api.github.com"
    REPO_OWNER: str = "vega-create"
    REPO_NAME: str = "vega-note"
    POSTS_PATH: str = "src/content/posts"
    GITHUB_BRANCH: str = "main"
    GITHUB_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Public site the repository deploys to. Used for post URLs and the
    # search-result preview.
    SITE_BASE_URL: str = "https://vega-note.com"
    SITE_NAME: str = "Vega Note"
    AUTHOR_NAME: str = "Vega"

    # Category list persistence for the editing surface.
    CATEGORIES_FILE: str = "./categories.json"
    DEFAULT_CATEGORIES: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["AI", "行銷", "開發", "生活"]
    )

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Security headers on every response.
    SECURITY_HEADERS_ENABLED: bool = True
    X_FRAME_OPTIONS: str = "DENY"
    REFERRER_POLICY: str = "no-referrer"
    CSP_DEFAULT: Optional[str] = (
        "default-src 'self'; img-src * data:; style-src 'self' 'unsafe-inline'; "
        "script-src 'self' 'unsafe-inline'; connect-src 'self'"
    )
    HSTS_MAX_AGE: int = 31536000
    HSTS_INCLUDE_SUBDOMAINS: bool = True
    HSTS_PRELOAD: bool = False

    @field_validator("DEFAULT_CATEGORIES", mode="before")
    @classmethod
    def _parse_list_values(cls, value):
        # Accepts a JSON list or a comma-separated string.
        if isinstance(value, str) and value.strip().startswith("["):
            return json.loads(value)
        if isinstance(value, str):
            parts = [p.strip() for p in value.split(",") if p.strip()]
            return parts
        return value

    @field_validator("SITE_BASE_URL", "GITHUB_API_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# Instantiate a single settings object for app-wide import.
# Any module can just `from postdesk.core.config import settings`.
settings = Settings()
