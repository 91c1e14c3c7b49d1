"""Tests for output-tree checks: digests, idempotence and draft visibility."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime
from pathlib import Path

import pytest

from blogkit.build.verify import (
    check_draft_visibility,
    output_path,
    tree_digest,
    verify_idempotent,
)
from blogkit.content.models import ContentItem, Severity


def _write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def _item(name: str, *, draft: bool) -> ContentItem:
    rel = Path("posts") / f"{name}.md"
    return ContentItem(
        title=name,
        date=datetime(2020, 1, 1, tzinfo=UTC),
        draft=draft,
        body="Body",
        path=Path("/site/content") / rel,
        relative_path=rel,
    )


class _FakeGenerator:
    """Writes one page per build; optionally stamps a counter into it."""

    def __init__(self, deterministic: bool = True) -> None:
        self.deterministic = deterministic
        self.calls: list[Path] = []
        self._counter = itertools.count()

    def build(self, include_drafts: bool = False, destination: Path | None = None):
        assert destination is not None
        self.calls.append(destination)
        stamp = "" if self.deterministic else str(next(self._counter))
        _write_tree(destination, {"index.html": f"<h1>Blog</h1>{stamp}"})


class TestTreeDigest:
    FILES = {"index.html": "<h1>Home</h1>", "posts/a/index.html": "<p>A</p>"}

    def test_same_tree_same_digest(self, tmp_path: Path):
        first = _write_tree(tmp_path / "one", self.FILES)
        second = _write_tree(tmp_path / "two", self.FILES)
        assert tree_digest(first) == tree_digest(second)

    def test_content_change_changes_digest(self, tmp_path: Path):
        first = _write_tree(tmp_path / "one", self.FILES)
        second = _write_tree(tmp_path / "two", {**self.FILES, "index.html": "<h1>Home!</h1>"})
        assert tree_digest(first) != tree_digest(second)

    def test_rename_changes_digest(self, tmp_path: Path):
        first = _write_tree(tmp_path / "one", self.FILES)
        second = _write_tree(
            tmp_path / "two", {"index.html": "<h1>Home</h1>", "posts/b/index.html": "<p>A</p>"}
        )
        assert tree_digest(first) != tree_digest(second)

    def test_missing_directory_equals_empty(self, tmp_path: Path):
        (tmp_path / "empty").mkdir()
        assert tree_digest(tmp_path / "missing") == tree_digest(tmp_path / "empty")


class TestVerifyIdempotent:
    def test_identical_builds(self):
        fake = _FakeGenerator()
        result = verify_idempotent(fake)  # type: ignore[arg-type]
        assert result.identical
        assert len(fake.calls) == 2
        assert fake.calls[0] != fake.calls[1]

    def test_differing_builds(self):
        result = verify_idempotent(_FakeGenerator(deterministic=False))  # type: ignore[arg-type]
        assert not result.identical
        assert result.first != result.second

    def test_scratch_directories_removed(self):
        fake = _FakeGenerator()
        verify_idempotent(fake)  # type: ignore[arg-type]
        assert not any(p.exists() for p in fake.calls)


class TestOutputPath:
    def test_pretty_url(self, tmp_path: Path):
        assert output_path(_item("a", draft=False), tmp_path) == tmp_path / "posts/a/index.html"

    def test_html_url(self, tmp_path: Path):
        item = _item("a", draft=False).model_copy(update={"url": "/old/a.html"})
        assert output_path(item, tmp_path) == tmp_path / "old/a.html"

    def test_root_url(self, tmp_path: Path):
        item = _item("a", draft=False).model_copy(update={"url": "/"})
        assert output_path(item, tmp_path) == tmp_path / "index.html"


class TestDraftVisibility:
    @pytest.fixture
    def items(self) -> list[ContentItem]:
        return [_item("live", draft=False), _item("wip", draft=True)]

    def test_production_without_drafts_is_clean(self, tmp_path: Path, items):
        _write_tree(tmp_path, {"posts/live/index.html": "live"})
        assert check_draft_visibility(items, tmp_path, include_drafts=False) == []

    def test_production_with_leaked_draft(self, tmp_path: Path, items):
        _write_tree(tmp_path, {"posts/live/index.html": "live", "posts/wip/index.html": "wip"})
        issues = check_draft_visibility(items, tmp_path, include_drafts=False)
        assert len(issues) == 1
        assert issues[0].severity == Severity.ERROR
        assert issues[0].path.name == "wip.md"
        assert "posts/wip/index.html" in issues[0].message

    def test_preview_with_draft_is_clean(self, tmp_path: Path, items):
        _write_tree(tmp_path, {"posts/live/index.html": "live", "posts/wip/index.html": "wip"})
        assert check_draft_visibility(items, tmp_path, include_drafts=True) == []

    def test_preview_missing_draft_warns(self, tmp_path: Path, items):
        _write_tree(tmp_path, {"posts/live/index.html": "live"})
        issues = check_draft_visibility(items, tmp_path, include_drafts=True)
        assert [i.severity for i in issues] == [Severity.WARNING]
        assert "/posts/wip/" in issues[0].message
