"""Filesystem-backed content store.

The store is a directory tree of markdown files, one post per file.
Posts are either single files (``posts/my-post.md``) or page bundles
(``posts/my-post/index.md``).  Section list pages (``_index.md``) are
not posts and are skipped.  The only write operation is ``create``,
which scaffolds a new post with a well-formed header.
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from datetime import datetime
from pathlib import Path

from blogkit.content.models import (
    ContentIssue,
    ContentItem,
    HeaderFormat,
    LoadResult,
    Severity,
)
from blogkit.content.parser import read_content_item
from blogkit.errors import ContentExistsError, ContentParseError

logger = logging.getLogger(__name__)

SECTION_PAGE = "_index.md"

# Alias to avoid shadowing by ContentStore.list method
_list = list

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_DASH_RE = re.compile(r"[\s_-]+")


def slugify(title: str) -> str:
    """Turn a title into a lower-case, hyphen-separated file name."""
    text = unicodedata.normalize("NFKC", title).lower()
    text = _SLUG_STRIP_RE.sub("", text)
    return _SLUG_DASH_RE.sub("-", text).strip("-")


class ContentStore:
    """Discovers, loads and scaffolds content items under one directory."""

    def __init__(self, content_dir: Path) -> None:
        self.content_dir = content_dir
        self._result: LoadResult | None = None

    # ── Read operations ──────────────────────────────────────────

    def discover(self) -> _list[Path]:
        """Return every post file below the content directory, sorted."""
        if not self.content_dir.is_dir():
            logger.warning("Content directory not found: %s", self.content_dir)
            return []

        paths: _list[Path] = []
        for md_file in sorted(self.content_dir.rglob("*.md")):
            rel = md_file.relative_to(self.content_dir)
            if md_file.name == SECTION_PAGE:
                continue
            if any(part.startswith(".") for part in rel.parts):
                continue
            paths.append(md_file)
        return paths

    def load(self, *, refresh: bool = False) -> LoadResult:
        """Parse every discovered file.

        Malformed files are collected as failures; they never stop the
        remaining files from loading.
        """
        if self._result is not None and not refresh:
            return self._result

        result = LoadResult()
        for path in self.discover():
            try:
                item = read_content_item(path, content_dir=self.content_dir)
            except ContentParseError as exc:
                logger.debug("Failed to parse %s: %s", path, exc.message)
                result.failures.append(
                    ContentIssue(path=path, severity=Severity.ERROR, message=exc.message)
                )
                continue
            result.items.append(item)

        logger.info(
            "Loaded %d content item(s), %d failure(s) from %s",
            len(result.items),
            len(result.failures),
            self.content_dir,
        )
        self._result = result
        return result

    def list(self, include_drafts: bool = True) -> _list[ContentItem]:
        """Return loaded items, newest first."""
        items = self.load().items
        if not include_drafts:
            items = [i for i in items if not i.draft]
        return sorted(items, key=lambda i: i.date, reverse=True)

    def get(self, name: str) -> ContentItem | None:
        """Return an item by page name or slug, or None if not found."""
        for item in self.load().items:
            if item.name == name or item.slug == name:
                return item
        return None

    # ── Write operations ─────────────────────────────────────────

    def create(
        self,
        title: str,
        *,
        date: datetime | None = None,
        draft: bool = True,
        section: str = "posts",
        fmt: HeaderFormat = HeaderFormat.TOML,
        bundle: bool = False,
    ) -> Path:
        """Scaffold a new post and return its path.

        Raises:
            ValueError: If the title is blank or slugifies to nothing.
            ContentExistsError: If the target file already exists.
        """
        if not title.strip():
            raise ValueError("title must not be empty")
        slug = slugify(title)
        if not slug:
            raise ValueError(f"cannot derive a file name from title {title!r}")

        published = date or datetime.now()
        if published.tzinfo is None:
            published = published.astimezone()
        published = published.replace(microsecond=0)

        base = self.content_dir / section if section else self.content_dir
        path = base / slug / "index.md" if bundle else base / f"{slug}.md"
        if path.exists():
            raise ContentExistsError(path)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_header(title, published, draft, fmt) + "\n", encoding="utf-8")
        logger.info("Created %s", path)
        self._result = None
        return path


def render_header(title: str, date: datetime, draft: bool, fmt: HeaderFormat) -> str:
    """Render a header block in the requested front matter flavour."""
    stamp = date.isoformat()
    if fmt is HeaderFormat.JSON:
        data = {"title": title, "date": stamp, "draft": draft}
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    if fmt is HeaderFormat.YAML:
        lines = [
            "---",
            f"title: {json.dumps(title, ensure_ascii=False)}",
            f"date: {stamp}",
            f"draft: {'true' if draft else 'false'}",
            "---",
        ]
    else:
        lines = [
            "+++",
            f"title = {_toml_string(title)}",
            f"date = {stamp}",
            f"draft = {'true' if draft else 'false'}",
            "+++",
        ]
    return "\n".join(lines) + "\n"


def _toml_string(value: str) -> str:
    """Quote a TOML string, preferring literal quotes like hand-written headers.

    Falls back to a basic string, which JSON quoting produces as long as
    non-ASCII characters are written as-is and DEL is escaped.
    """
    if "'" not in value and not any(_is_toml_control(c) for c in value):
        return f"'{value}'"
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


def _is_toml_control(char: str) -> bool:
    return (char < " " and char != "\t") or char == "\x7f"
