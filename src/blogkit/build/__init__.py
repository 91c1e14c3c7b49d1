"""Build invocation: generator wrapper and output-tree checks."""

from blogkit.build.generator import BuildResult, Generator
from blogkit.build.verify import (
    IdempotenceResult,
    check_draft_visibility,
    output_path,
    tree_digest,
    verify_idempotent,
)

__all__ = [
    "BuildResult",
    "Generator",
    "IdempotenceResult",
    "check_draft_visibility",
    "output_path",
    "tree_digest",
    "verify_idempotent",
]
