"""Tests for ContentItem derived properties."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from blogkit.content.models import ContentIssue, ContentItem, Severity


def _item(relative: str, **kwargs: object) -> ContentItem:
    rel = Path(relative)
    return ContentItem(
        title="T",
        date=datetime(2020, 1, 1, tzinfo=UTC),
        body="Body",
        path=Path("/site/content") / rel,
        relative_path=rel,
        **kwargs,  # type: ignore[arg-type]
    )


class TestNames:
    def test_single_file(self):
        item = _item("posts/ci-caching.md")
        assert item.name == "ci-caching"
        assert item.section == "posts"
        assert item.is_bundle is False

    def test_bundle(self):
        item = _item("posts/ci-caching/index.md")
        assert item.name == "ci-caching"
        assert item.section == "posts"
        assert item.is_bundle is True

    def test_root_level(self):
        item = _item("about.md")
        assert item.section == ""


class TestUrlPath:
    @pytest.mark.parametrize(
        ("relative", "kwargs", "expected"),
        [
            ("posts/ci-caching.md", {}, "/posts/ci-caching/"),
            ("posts/ci-caching/index.md", {}, "/posts/ci-caching/"),
            ("posts/2020/migrations.md", {}, "/posts/2020/migrations/"),
            ("about.md", {}, "/about/"),
            ("posts/My Post.md", {}, "/posts/my-post/"),
            ("posts/x.md", {"slug": "Pretty Name"}, "/posts/pretty-name/"),
            ("posts/x.md", {"url": "/custom/path"}, "/custom/path/"),
            ("posts/x.md", {"url": "legacy/page.html"}, "/legacy/page.html"),
            ("posts/x.md", {"url": "/"}, "/"),
        ],
    )
    def test_default_permalinks(self, relative: str, kwargs: dict, expected: str):
        assert _item(relative, **kwargs).url_path == expected


class TestContentIssue:
    def test_str(self):
        issue = ContentIssue(path=Path("a.md"), severity=Severity.WARNING, message="hm")
        assert str(issue) == "a.md: warning: hm"

    def test_default_severity_is_error(self):
        assert ContentIssue(path=Path("a.md"), message="x").severity == Severity.ERROR
