"""
Publish a markdown post from disk through a running postdesk server.

The file must already carry front-matter (as produced by the editor's
output panel). Its name becomes the published filename.

    python scripts/publish_post.py posts/my-post-ab12cd34.md --endpoint http://127.0.0.1:8000/api/publish
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Make backend package importable when running from repo root.
sys.path.append(str(ROOT / "backend"))

from postdesk.content.serializer import read_front_matter  # noqa: E402
from postdesk.publishing.client import PublishClient, PublishClientError  # noqa: E402

DEFAULT_ENDPOINT = "http://127.0.0.1:8000/api/publish"


def build_message(metadata: dict, filename: str) -> str:
    title = str(metadata.get("title") or "").strip()
    return f"新增文章: {title or filename}"


def publish_file(path: Path, *, endpoint: str, writer_key: str, message: str | None = None) -> str:
    raw = path.read_text(encoding="utf-8")
    try:
        metadata, _ = read_front_matter(raw)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc
    if not metadata.get("title"):
        raise ValueError(f"{path} has no front-matter title")
    client = PublishClient(endpoint, writer_key)
    return client.publish(path.name, raw, message=message or build_message(metadata, path.name))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Publish a markdown post to the content repository.")
    parser.add_argument("path", type=Path, help="Markdown file with front-matter")
    parser.add_argument("--endpoint", default=os.getenv("POSTDESK_ENDPOINT", DEFAULT_ENDPOINT))
    parser.add_argument("--key", default=os.getenv("WRITER_KEY"), help="Writer key (defaults to $WRITER_KEY)")
    parser.add_argument("--message", default=None, help="Commit message")
    args = parser.parse_args(argv)

    if not args.key:
        parser.error("a writer key is required (--key or WRITER_KEY)")

    try:
        url = publish_file(args.path, endpoint=args.endpoint, writer_key=args.key, message=args.message)
    except (OSError, ValueError, PublishClientError) as exc:
        print(f"Publish failed: {exc}", file=sys.stderr)
        return 1
    print(f"Published {args.path.name} -> {url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
