"""Exception hierarchy shared by the content, build and lint layers."""

from __future__ import annotations

from pathlib import Path


class BlogkitError(Exception):
    """Base error for everything blogkit raises."""


class ContentParseError(BlogkitError):
    """A content file has a malformed header or an unusable body."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class ContentExistsError(BlogkitError):
    """Scaffolding a post would overwrite an existing file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Content file already exists: {path}")


class ToolError(BlogkitError):
    """Base error for external tool invocations."""


class ToolNotFoundError(ToolError):
    """The external binary is not on the PATH."""

    def __init__(self, binary: str, label: str = "") -> None:
        self.binary = binary
        self.label = label
        suffix = f" (label={label})" if label else ""
        super().__init__(f"command not found: {binary}{suffix}")


class ToolTimeoutError(ToolError):
    """The external tool did not finish in time."""


class BuildError(ToolError):
    """The generator exited non-zero."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Generator failed (exit {returncode}): {stderr[:500]}")


class LintError(ToolError):
    """The linter failed for a reason other than style violations."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Linter failed (exit {returncode}): {stderr[:500]}")
