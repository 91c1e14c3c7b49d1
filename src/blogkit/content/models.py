"""Content domain models: pure Pydantic v2 data types.

A ContentItem is one blog post: a structured header (title, publication
timestamp, optional draft flag) followed by a markdown body.  ItemHeader
is the validation schema for the header block alone.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
)


class HeaderFormat(StrEnum):
    """Front matter flavour, identified by its opening delimiter."""

    TOML = "toml"
    YAML = "yaml"
    JSON = "json"


class Severity(StrEnum):
    """How a content issue affects the exit status."""

    ERROR = "error"
    WARNING = "warning"


class ItemHeader(BaseModel):
    """Schema for the header block of a content file.

    Unknown keys are kept (Hugo sites carry plenty of theme-specific
    parameters) and surface as ``model_extra``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    title: StrictStr
    date: AwareDatetime
    draft: StrictBool = False
    slug: str | None = None
    url: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _reject_bare_dates(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            raise ValueError("date must be a date-time with a UTC offset, not a bare date")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _wrap_single_tag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class ContentItem(BaseModel):
    """A single blog post loaded from the content store."""

    title: str
    date: datetime
    draft: bool = False
    body: str
    slug: str | None = None
    url: str | None = None
    tags: list[str] = Field(default_factory=list)
    path: Path
    relative_path: Path
    header_format: HeaderFormat = HeaderFormat.TOML
    extra: dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        """Page name: the bundle directory for ``index.md``, else the file stem."""
        if self.path.stem == "index":
            return self.path.parent.name
        return self.path.stem

    @property
    def section(self) -> str:
        """Top-level content directory the item lives in, "" at the root."""
        parent = self.relative_path.parent
        if self.is_bundle:
            parent = parent.parent
        return parent.parts[0] if parent.parts else ""

    @property
    def is_bundle(self) -> bool:
        return self.path.stem == "index"

    @property
    def url_path(self) -> str:
        """Site-relative URL under the generator's default permalink rules."""
        if self.url:
            url = self.url.strip("/")
            if not url:
                return "/"
            return f"/{url}" if url.endswith(".html") else f"/{url}/"
        parent = self.relative_path.parent
        if self.is_bundle:
            parent = parent.parent
        segments = [*parent.parts, self.slug or self.name]
        return "/" + "/".join(_urlize(s) for s in segments if s) + "/"


class ContentIssue(BaseModel):
    """A problem found while loading or validating a content file."""

    path: Path
    severity: Severity = Severity.ERROR
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.severity}: {self.message}"


class LoadResult(BaseModel):
    """Items that parsed cleanly plus one issue per file that did not."""

    items: list[ContentItem] = Field(default_factory=list)
    failures: list[ContentIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _urlize(segment: str) -> str:
    return "-".join(segment.strip().lower().split())
