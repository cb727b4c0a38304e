"""
Startup-time checks for publishing configuration.
"""

from __future__ import annotations

from postdesk.core.config import settings
from postdesk.core.logging import get_structured_logger


logger = get_structured_logger("postdesk.startup")


def _is_production() -> bool:
    env = (settings.ENVIRONMENT or "").strip().lower()
    return env in {"production", "prod"}


def _has_placeholder_secret(value: str | None) -> bool:
    if not value:
        return True
    lowered = value.strip().lower()
    return lowered in {"changeme", "secret", "writer-key", "password"}


def run_startup_checks() -> None:
    missing: list[str] = []
    insecure: list[str] = []

    if not settings.GITHUB_TOKEN:
        missing.append("GITHUB_TOKEN")
    if not settings.WRITER_KEY:
        missing.append("WRITER_KEY")
    elif _has_placeholder_secret(settings.WRITER_KEY):
        insecure.append("WRITER_KEY")

    if not missing and not insecure:
        return

    if _is_production() and ("WRITER_KEY" in missing or insecure):
        parts = []
        if missing:
            parts.append(f"Missing required settings: {', '.join(sorted(set(missing)))}")
        if insecure:
            parts.append(f"Insecure settings detected: {', '.join(sorted(set(insecure)))}")
        raise RuntimeError("Startup checks failed. " + " ".join(parts))

    # Publishing still answers with a configuration error per request.
    logger.warning(
        "startup.config_incomplete",
        extra={"missing": sorted(set(missing)), "insecure": sorted(set(insecure))},
    )
