"""Front matter parsing for content files.

Supports the three header flavours the generator understands:

    +++            ---            {
    title = '…'    title: …         "title": "…",
    +++            ---            }

TOML is parsed with ``tomllib``, YAML with PyYAML and JSON with ``json``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from blogkit.content.models import ContentItem, HeaderFormat, ItemHeader
from blogkit.errors import ContentParseError

logger = logging.getLogger(__name__)

_DELIMITERS: dict[str, HeaderFormat] = {
    "+++": HeaderFormat.TOML,
    "---": HeaderFormat.YAML,
}


def split_header(text: str) -> tuple[HeaderFormat, str, str]:
    """Split a content file into header format, raw header and body.

    Raises:
        ValueError: If the text has no recognisable front matter block.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines:
        raise ValueError("file is empty")

    opener = lines[0].strip()
    if opener in _DELIMITERS:
        for idx in range(1, len(lines)):
            if lines[idx].strip() == opener:
                raw = "".join(lines[1:idx])
                body = "".join(lines[idx + 1 :])
                return _DELIMITERS[opener], raw, body
        raise ValueError(f"front matter opened with {opener!r} is never closed")

    if opener.startswith("{"):
        text = text.lstrip()
        try:
            _obj, end = json.JSONDecoder().raw_decode(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON front matter: {exc.msg}") from exc
        return HeaderFormat.JSON, text[:end], text[end:]

    raise ValueError("missing front matter")


def parse_header(fmt: HeaderFormat, raw: str) -> dict[str, Any]:
    """Parse a raw header block into a mapping.

    Raises:
        ValueError: If the block does not parse or is not a mapping.
    """
    try:
        if fmt is HeaderFormat.TOML:
            data: Any = tomllib.loads(raw)
        elif fmt is HeaderFormat.YAML:
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"invalid TOML front matter: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML front matter: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON front matter: {exc.msg}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"front matter must be a mapping, got {type(data).__name__}")
    return data


def parse_content_item(
    path: Path,
    text: str,
    *,
    content_dir: Path | None = None,
) -> ContentItem:
    """Parse one content file into a ContentItem.

    Args:
        path: File the text was read from.
        text: Full file contents.
        content_dir: Root of the content store, used to compute the
            item's relative path. Defaults to the file's parent.

    Raises:
        ContentParseError: On a malformed header or a missing or invalid
            field.
    """
    try:
        fmt, raw, body = split_header(text)
        data = parse_header(fmt, raw)
    except ValueError as exc:
        raise ContentParseError(path, str(exc)) from exc

    try:
        header = ItemHeader.model_validate(data)
    except ValidationError as exc:
        raise ContentParseError(path, _format_validation_error(exc)) from exc

    base = content_dir if content_dir is not None else path.parent
    try:
        relative = path.relative_to(base)
    except ValueError:
        relative = Path(path.name)

    logger.debug("Parsed %s (%s header, draft=%s)", path, fmt, header.draft)
    return ContentItem(
        title=header.title,
        date=header.date,
        draft=header.draft,
        body=body.lstrip("\n"),
        slug=header.slug,
        url=header.url,
        tags=header.tags,
        path=path,
        relative_path=relative,
        header_format=fmt,
        extra=dict(header.model_extra or {}),
    )


def read_content_item(path: Path, *, content_dir: Path | None = None) -> ContentItem:
    """Read and parse a content file from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentParseError(path, f"could not read file: {exc}") from exc
    return parse_content_item(path, text, content_dir=content_dir)


def _format_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into ``field: message`` pairs."""
    parts: list[str] = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "header"
        if err["type"] == "missing":
            parts.append(f"{field}: required field is missing")
        else:
            parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)
