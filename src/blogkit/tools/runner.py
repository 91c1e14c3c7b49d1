"""Single-shot subprocess invocation of external tools.

Centralizes every subprocess call (generator, preview server, linter)
so that missing binaries and timeouts surface as the same errors.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from blogkit.errors import ToolError, ToolNotFoundError, ToolTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Exit status and captured output of one external command."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr combined, in that order."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def run_tool(
    cmd: list[str],
    *,
    cwd: Path | None = None,
    timeout: int | None = None,
    label: str = "tool",
    capture: bool = True,
) -> ToolResult:
    """Run an external command once and return its result.

    Args:
        cmd: Command line, binary first.
        cwd: Working directory for the process.
        timeout: Timeout in seconds, or None to wait indefinitely.
        label: Label for logging and error messages.
        capture: Capture stdout/stderr. When False the child inherits the
            terminal, which is what a foreground preview server needs.

    Returns:
        The ToolResult. A non-zero exit code is not an error here; the
        caller decides what it means.

    Raises:
        ToolError: If ``cwd`` is not an existing directory.
        ToolNotFoundError: If the binary is not on the PATH.
        ToolTimeoutError: If the command exceeds ``timeout``.
    """
    logger.debug("Running %s: %s", label, shlex.join(cmd))
    if cwd is not None and not Path(cwd).is_dir():
        raise ToolError(f"{label}: working directory not found: {cwd}")

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(cmd[0], label) from exc
    except subprocess.TimeoutExpired as exc:
        raise ToolTimeoutError(f"{label} timed out after {timeout}s") from exc

    logger.debug("%s exited with %d", label, result.returncode)
    return ToolResult(
        command=list(cmd),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
