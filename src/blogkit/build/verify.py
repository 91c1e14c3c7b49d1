"""Checks on a rendered output tree.

The generator owns rendering; these helpers only inspect what it wrote:
a content digest for idempotence, and the presence or absence of draft
pages depending on the build mode.
"""

from __future__ import annotations

import hashlib
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from blogkit.build.generator import Generator
from blogkit.content.models import ContentIssue, ContentItem, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdempotenceResult:
    """Digests of two consecutive builds of the same content."""

    first: str
    second: str

    @property
    def identical(self) -> bool:
        return self.first == self.second


def tree_digest(output_dir: Path) -> str:
    """SHA-256 over every file's relative path and bytes, in sorted order.

    Two trees with the same files and contents always give the same
    digest, regardless of timestamps or where they live on disk.
    """
    digest = hashlib.sha256()
    if not output_dir.is_dir():
        return digest.hexdigest()

    files = sorted(p for p in output_dir.rglob("*") if p.is_file())
    for path in files:
        rel = path.relative_to(output_dir).as_posix()
        digest.update(rel.encode("utf-8"))
        digest.update(b"\0")
        digest.update(hashlib.sha256(path.read_bytes()).digest())
    return digest.hexdigest()


def verify_idempotent(generator: Generator, include_drafts: bool = False) -> IdempotenceResult:
    """Build twice into scratch directories and compare the trees."""
    with tempfile.TemporaryDirectory(prefix="blogkit-") as tmp:
        first_dir = Path(tmp) / "first"
        second_dir = Path(tmp) / "second"
        generator.build(include_drafts=include_drafts, destination=first_dir)
        generator.build(include_drafts=include_drafts, destination=second_dir)
        result = IdempotenceResult(first=tree_digest(first_dir), second=tree_digest(second_dir))

    if not result.identical:
        logger.warning("Consecutive builds differ: %s != %s", result.first, result.second)
    return result


def output_path(item: ContentItem, output_dir: Path) -> Path:
    """File the generator writes for ``item`` under default permalinks."""
    rel = item.url_path.strip("/")
    if rel.endswith(".html"):
        return output_dir / rel
    return output_dir / rel / "index.html" if rel else output_dir / "index.html"


def check_draft_visibility(
    items: list[ContentItem],
    output_dir: Path,
    include_drafts: bool,
) -> list[ContentIssue]:
    """Compare draft flags with what actually landed in the output tree.

    A production build (``include_drafts=False``) must not contain any
    draft page; each one found is an error.  A preview build should
    contain every draft; a missing one is only a warning, since custom
    permalink rules can move pages elsewhere.
    """
    issues: list[ContentIssue] = []
    for item in items:
        if not item.draft:
            continue
        page = output_path(item, output_dir)
        if not include_drafts and page.exists():
            issues.append(
                ContentIssue(
                    path=item.path,
                    severity=Severity.ERROR,
                    message=f"draft published to {page.relative_to(output_dir).as_posix()}",
                )
            )
        elif include_drafts and not page.exists():
            issues.append(
                ContentIssue(
                    path=item.path,
                    severity=Severity.WARNING,
                    message=f"draft missing from preview output (expected {item.url_path})",
                )
            )
    return issues
