"""Shared fixtures: a throwaway site with a content directory."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

PostFactory = Callable[..., Path]


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A site root with an empty ``content/posts`` section."""
    (tmp_path / "content" / "posts").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def make_post(site: Path) -> PostFactory:
    """Write a TOML-headed post under ``content/`` and return its path."""

    def _make_post(
        name: str = "hello-world.md",
        *,
        title: str | None = "Hello World",
        date: str | None = "2020-02-07T10:00:00+01:00",
        draft: str | None = None,
        body: str = "Some words about builds.\n",
        section: str = "posts",
        extra: str = "",
    ) -> Path:
        lines = ["+++"]
        if title is not None:
            lines.append(f"title = '{title}'")
        if date is not None:
            lines.append(f"date = {date}")
        if draft is not None:
            lines.append(f"draft = {draft}")
        if extra:
            lines.append(extra)
        lines.append("+++")
        lines.append("")
        path = site / "content" / section / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
        return path

    return _make_post
