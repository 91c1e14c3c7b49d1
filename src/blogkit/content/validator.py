"""Corpus-level validation of the content store.

Per-file header problems come from the loader.  This module adds the
checks that need the whole corpus (duplicate titles, colliding output
URLs) and the per-item checks that depend on the draft flag.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from blogkit.content.models import ContentIssue, ContentItem, Severity
from blogkit.content.store import ContentStore

logger = logging.getLogger(__name__)


class ValidationReport(BaseModel):
    """Outcome of validating a content store."""

    checked: int = 0
    issues: list[ContentIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ContentIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ContentIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def passed(self, *, strict: bool = False) -> bool:
        """True when there are no errors (and no warnings, if strict)."""
        if strict:
            return not self.issues
        return not self.errors


def validate_items(
    items: list[ContentItem],
    *,
    now: datetime | None = None,
) -> list[ContentIssue]:
    """Run the per-item and cross-item checks on parsed items.

    Args:
        items: Parsed content items.
        now: Reference time for the future-date check.

    Returns:
        Issues in file order.
    """
    now = now or datetime.now(tz=UTC)
    issues: list[ContentIssue] = []

    for item in items:
        if not item.body.strip():
            # Drafts are allowed to be unfinished
            issues.append(
                ContentIssue(
                    path=item.path,
                    severity=Severity.WARNING if item.draft else Severity.ERROR,
                    message="body is empty",
                )
            )
        if not item.draft and item.date > now:
            issues.append(
                ContentIssue(
                    path=item.path,
                    severity=Severity.WARNING,
                    message=(
                        f"dated in the future ({item.date.isoformat()}); "
                        "production builds will not publish it yet"
                    ),
                )
            )

    issues.extend(_duplicate_titles(items))
    issues.extend(_colliding_urls(items))
    return sorted(issues, key=lambda i: str(i.path))


def validate_corpus(store: ContentStore, *, now: datetime | None = None) -> ValidationReport:
    """Load and validate every content item in the store."""
    result = store.load()
    issues = list(result.failures)
    issues.extend(validate_items(result.items, now=now))
    report = ValidationReport(
        checked=len(result.items) + len(result.failures),
        issues=sorted(issues, key=lambda i: str(i.path)),
    )
    logger.info(
        "Validated %d file(s): %d error(s), %d warning(s)",
        report.checked,
        len(report.errors),
        len(report.warnings),
    )
    return report


def _duplicate_titles(items: list[ContentItem]) -> list[ContentIssue]:
    """Titles are unique by convention only, so duplicates are warnings."""
    by_title: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        by_title[item.title.strip().casefold()].append(item)

    issues: list[ContentIssue] = []
    for group in by_title.values():
        if len(group) < 2:
            continue
        ordered = sorted(group, key=lambda i: str(i.path))
        first = ordered[0]
        for other in ordered[1:]:
            issues.append(
                ContentIssue(
                    path=other.path,
                    severity=Severity.WARNING,
                    message=f"duplicate title {other.title!r} (also in {first.path.name})",
                )
            )
    return issues


def _colliding_urls(items: list[ContentItem]) -> list[ContentIssue]:
    """Two items rendering to the same URL would overwrite each other."""
    by_url: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        by_url[item.url_path].append(item)

    issues: list[ContentIssue] = []
    for url, group in by_url.items():
        if len(group) < 2:
            continue
        names = ", ".join(sorted(i.path.name for i in group))
        for item in group:
            issues.append(
                ContentIssue(
                    path=item.path,
                    severity=Severity.ERROR,
                    message=f"output URL {url} is shared by {names}",
                )
            )
    return issues
