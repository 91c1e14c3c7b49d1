"""Tests for corpus validation."""

from datetime import UTC, datetime
from pathlib import Path

from blogkit.content.models import ContentItem, Severity
from blogkit.content.store import ContentStore
from blogkit.content.validator import ValidationReport, validate_corpus, validate_items

NOW = datetime(2026, 10, 16, tzinfo=UTC)


def _item(
    name: str = "post.md",
    title: str = "Post",
    *,
    draft: bool = False,
    body: str = "Body",
    date: datetime | None = None,
    slug: str | None = None,
) -> ContentItem:
    rel = Path("posts") / name
    return ContentItem(
        title=title,
        date=date or datetime(2020, 1, 1, tzinfo=UTC),
        draft=draft,
        body=body,
        slug=slug,
        path=Path("/site/content") / rel,
        relative_path=rel,
    )


class TestValidateItems:
    def test_clean_items(self):
        items = [_item("a.md", "A"), _item("b.md", "B")]
        assert validate_items(items, now=NOW) == []

    def test_empty_body_is_error_when_published(self):
        issues = validate_items([_item(body="  \n")], now=NOW)
        assert len(issues) == 1
        assert issues[0].severity == Severity.ERROR
        assert issues[0].message == "body is empty"

    def test_empty_body_is_warning_for_draft(self):
        issues = validate_items([_item(body="", draft=True)], now=NOW)
        assert [i.severity for i in issues] == [Severity.WARNING]

    def test_duplicate_titles_warn(self):
        items = [
            _item("2019-keepalive.md", "HTTP keep-alive"),
            _item("2020-keepalive.md", "http keep-alive "),
        ]
        issues = validate_items(items, now=NOW)
        assert len(issues) == 1
        assert issues[0].severity == Severity.WARNING
        assert issues[0].path.name == "2020-keepalive.md"
        assert "2019-keepalive.md" in issues[0].message

    def test_colliding_urls_error(self):
        items = [_item("one.md", "One", slug="same"), _item("two.md", "Two", slug="same")]
        issues = validate_items(items, now=NOW)
        assert len(issues) == 2
        assert all(i.severity == Severity.ERROR for i in issues)
        assert "/posts/same/" in issues[0].message

    def test_future_post_warns(self):
        issues = validate_items([_item(date=datetime(2030, 1, 1, tzinfo=UTC))], now=NOW)
        assert len(issues) == 1
        assert issues[0].severity == Severity.WARNING
        assert "future" in issues[0].message

    def test_future_draft_is_fine(self):
        item = _item(date=datetime(2030, 1, 1, tzinfo=UTC), draft=True)
        assert validate_items([item], now=NOW) == []


class TestValidateCorpus:
    def test_clean_corpus(self, site: Path, make_post):
        make_post("a.md", title="A")
        make_post("b.md", title="B", draft="true")
        report = validate_corpus(ContentStore(site / "content"), now=NOW)
        assert report.checked == 2
        assert report.issues == []
        assert report.passed()
        assert report.passed(strict=True)

    def test_parse_failures_are_errors(self, site: Path, make_post):
        make_post("a.md", title="A")
        make_post("broken.md", title="")
        make_post("bad-draft.md", title="C", draft="'yes'")
        report = validate_corpus(ContentStore(site / "content"), now=NOW)
        assert report.checked == 3
        assert sorted(i.path.name for i in report.errors) == ["bad-draft.md", "broken.md"]
        assert not report.passed()

    def test_warnings_only_fail_when_strict(self, site: Path, make_post):
        make_post("a.md", title="Same")
        make_post("b.md", title="Same")
        report = validate_corpus(ContentStore(site / "content"), now=NOW)
        assert report.errors == []
        assert len(report.warnings) == 1
        assert report.passed()
        assert not report.passed(strict=True)

    def test_empty_store(self, site: Path):
        report = validate_corpus(ContentStore(site / "content"), now=NOW)
        assert report == ValidationReport(checked=0, issues=[])
