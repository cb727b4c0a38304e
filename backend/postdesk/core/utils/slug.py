import re
import secrets
import string

SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 8

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\u4e00-\u9fff\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-{2,}")


def slugify(title: str) -> str:
    slug = title.lower()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug or "untitled"


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_slug(title: str) -> str:
    """Slug for a new post file. Two calls with the same title never collide."""
    return f"{slugify(title)}-{random_suffix()}"
