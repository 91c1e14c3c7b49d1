"""Markdown style linting through markdownlint-cli.

By default the linter runs in a container with the site root mounted
at ``/workdir``, the image's working directory:

    docker run --rm -v "$PWD:/workdir" ghcr.io/igorshubovych/markdownlint-cli:latest "<glob>"

Exit 0 means no violations and exit 1 means violations were reported.
Any other code is a failure of the tool itself.
"""

from __future__ import annotations

import logging
import re

from blogkit.config import BlogkitConfig
from blogkit.errors import LintError
from blogkit.lint.models import LintDiagnostic, LintReport
from blogkit.tools.runner import run_tool

logger = logging.getLogger(__name__)

CONTAINER_WORKDIR = "/workdir"
VIOLATIONS_EXIT_CODE = 1

# content/posts/a.md:12:3 error MD001/heading-increment Heading levels ... [Expected: h2; Actual: h3]
_DIAGNOSTIC_RE = re.compile(
    r"^(?P<path>.+?):(?P<line>\d+)(?::(?P<column>\d+))?\s+"
    r"(?:(?:error|warning)\s+)?"
    r"(?P<rule>MD\d{3})(?:/(?P<aliases>\S+))?\s+"
    r"(?P<message>.*)$"
)


def parse_output(text: str) -> tuple[list[LintDiagnostic], list[str]]:
    """Split linter output into diagnostics and lines that did not parse."""
    diagnostics: list[LintDiagnostic] = []
    unparsed: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        match = _DIAGNOSTIC_RE.match(line)
        if match is None:
            unparsed.append(line)
            continue
        aliases = match.group("aliases")
        column = match.group("column")
        diagnostics.append(
            LintDiagnostic(
                path=match.group("path"),
                line=int(match.group("line")),
                column=int(column) if column else None,
                rule=match.group("rule"),
                aliases=aliases.split("/") if aliases else [],
                message=match.group("message").strip(),
            )
        )
    return diagnostics, unparsed


class MarkdownLinter:
    """Runs markdownlint over a glob of files below the site root."""

    def __init__(self, config: BlogkitConfig) -> None:
        self._config = config

    def command(self, glob: str | None = None) -> list[str]:
        """Command line for linting ``glob`` (default: the content tree)."""
        lint = self._config.lint
        pattern = glob or self._config.lint_glob

        if lint.use_container:
            cmd = [
                lint.runtime,
                "run",
                "--rm",
                "-v",
                f"{self._config.site_root}:{CONTAINER_WORKDIR}",
                lint.image,
            ]
        else:
            cmd = [lint.binary]

        if lint.config_file:
            cmd.extend(["--config", lint.config_file])
        cmd.append(pattern)
        return cmd

    def run(self, glob: str | None = None) -> LintReport:
        """Lint the matching files and return the parsed report.

        Raises:
            LintError: If the linter fails for any reason other than
                finding violations.
            ToolNotFoundError: If the container runtime or binary is missing.
        """
        cmd = self.command(glob)
        result = run_tool(
            cmd,
            cwd=self._config.site_root,
            timeout=self._config.lint.timeout,
            label="lint",
        )
        if result.returncode not in (0, VIOLATIONS_EXIT_CODE):
            raise LintError(result.returncode, result.stderr or result.stdout)

        diagnostics, unparsed = parse_output(result.output)
        if result.returncode == VIOLATIONS_EXIT_CODE and not diagnostics:
            logger.warning("Linter reported violations but no diagnostic could be parsed")

        logger.info("Lint finished with %d diagnostic(s)", len(diagnostics))
        return LintReport(
            command=cmd,
            returncode=result.returncode,
            diagnostics=diagnostics,
            unparsed=unparsed,
        )
