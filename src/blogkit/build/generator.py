"""Build and preview invocations of the external static-site generator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from blogkit.config import BlogkitConfig
from blogkit.errors import BuildError
from blogkit.tools.runner import ToolResult, run_tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """A finished generator run."""

    output_dir: Path
    include_drafts: bool
    tool: ToolResult


class Generator:
    """Wraps the generator binary (Hugo by default).

    The generator reads the whole content store and writes a rendered
    tree to the output directory.  Nothing here renders content itself.
    """

    def __init__(self, config: BlogkitConfig) -> None:
        self._config = config

    @property
    def binary(self) -> str:
        return self._config.generator.binary

    def build_command(
        self,
        include_drafts: bool = False,
        destination: Path | None = None,
    ) -> list[str]:
        """Command line for a one-shot render of the site."""
        output = destination or self._config.output_path
        cmd = [
            self.binary,
            "--source",
            str(self._config.site_root),
            "--destination",
            str(output),
            "--cleanDestinationDir",
        ]
        if include_drafts:
            cmd.append("--buildDrafts")
        cmd.extend(self._config.generator.extra_args)
        return cmd

    def build(
        self,
        include_drafts: bool = False,
        destination: Path | None = None,
    ) -> BuildResult:
        """Render the site once.

        Raises:
            BuildError: If the generator exits non-zero, e.g. on a content
                file it cannot parse. No partial output is guaranteed.
            ToolNotFoundError: If the generator binary is missing.
        """
        output = destination or self._config.output_path
        result = run_tool(
            self.build_command(include_drafts=include_drafts, destination=output),
            cwd=self._config.site_root,
            timeout=self._config.generator.timeout,
            label="build",
        )
        if not result.ok:
            raise BuildError(result.returncode, result.stderr or result.stdout)

        logger.info("Built site into %s (drafts=%s)", output, include_drafts)
        return BuildResult(output_dir=output, include_drafts=include_drafts, tool=result)

    def serve_command(
        self,
        include_drafts: bool = True,
        port: int | None = None,
        bind: str | None = None,
    ) -> list[str]:
        """Command line for the live-reload preview server."""
        cmd = [self.binary, "server"]
        if include_drafts:
            cmd.append("-D")
        cmd.extend(
            [
                "--source",
                str(self._config.site_root),
                "--port",
                str(port or self._config.generator.server_port),
                "--bind",
                bind or self._config.generator.server_bind,
            ]
        )
        return cmd

    def serve(
        self,
        include_drafts: bool = True,
        port: int | None = None,
        bind: str | None = None,
    ) -> int:
        """Run the preview server in the foreground until it stops.

        Returns:
            The server's exit code; 0 when interrupted with Ctrl-C.
        """
        cmd = self.serve_command(include_drafts=include_drafts, port=port, bind=bind)
        try:
            result = run_tool(cmd, cwd=self._config.site_root, label="serve", capture=False)
        except KeyboardInterrupt:
            logger.info("Preview server stopped")
            return 0
        return result.returncode
