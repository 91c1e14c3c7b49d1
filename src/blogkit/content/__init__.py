"""Content domain: post models, front matter parsing and the content store.

A content item is one markdown file: a structured header (title, date,
optional draft flag) followed by the post body.  The store discovers and
loads every item under the content directory; the validator checks the
corpus as a whole.
"""

from blogkit.content.models import (
    ContentIssue,
    ContentItem,
    HeaderFormat,
    ItemHeader,
    LoadResult,
    Severity,
)
from blogkit.content.parser import parse_content_item, read_content_item, split_header
from blogkit.content.store import ContentStore, slugify
from blogkit.content.validator import ValidationReport, validate_corpus, validate_items

__all__ = [
    "ContentIssue",
    "ContentItem",
    "ContentStore",
    "HeaderFormat",
    "ItemHeader",
    "LoadResult",
    "Severity",
    "ValidationReport",
    "parse_content_item",
    "read_content_item",
    "slugify",
    "split_header",
    "validate_corpus",
    "validate_items",
]
