"""CLI interface for blogkit."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from blogkit.build import Generator, check_draft_visibility, tree_digest, verify_idempotent
from blogkit.config import BlogkitConfig, load_config, merge_cli_overrides
from blogkit.content import (
    ContentIssue,
    ContentStore,
    HeaderFormat,
    Severity,
    validate_corpus,
)
from blogkit.errors import (
    BuildError,
    ContentExistsError,
    LintError,
    ToolError,
    ToolNotFoundError,
    ToolTimeoutError,
)
from blogkit.lint import MarkdownLinter

app = typer.Typer(
    name="blogkit",
    help="Validate, build, preview and lint a markdown blog.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Shell convention for "command not found"
EXIT_TOOL_NOT_FOUND = 127


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from blogkit import __version__

        console.print(f"blogkit {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    """Route blogkit's log records through Rich on stderr."""
    pkg_logger = logging.getLogger("blogkit")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=err_console, show_path=False))


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .blogkit.toml file."),
    ] = None,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", "-r", help="Site root directory. Defaults to the config value."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging, including tool command lines."),
    ] = False,
) -> None:
    """blogkit - content checks and tool wrappers for a static blog."""
    _setup_logging(verbose)
    config = load_config(config_path, root=root)
    ctx.obj = merge_cli_overrides(config, site_root=root)


def _config(ctx: typer.Context) -> BlogkitConfig:
    return ctx.obj if isinstance(ctx.obj, BlogkitConfig) else load_config()


def _rel(path: Path, config: BlogkitConfig) -> str:
    """Display a path relative to the site root when possible."""
    try:
        return path.resolve().relative_to(config.site_root).as_posix()
    except ValueError:
        return str(path)


def _print_issues(issues: list[ContentIssue], config: BlogkitConfig) -> None:
    for issue in issues:
        colour = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(
            f"[{colour}]{issue.severity}[/{colour}] "
            f"{escape(_rel(issue.path, config))}: {escape(issue.message)}"
        )


@contextmanager
def _tool_errors() -> Iterator[None]:
    """Convert external tool failures into messages and exit codes."""
    try:
        yield
    except ToolNotFoundError as exc:
        console.print(f"[red]Error:[/red] command not found: {escape(exc.binary)}")
        console.print("Install it or point blogkit at it in .blogkit.toml.")
        raise typer.Exit(EXIT_TOOL_NOT_FOUND) from exc
    except ToolTimeoutError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except (BuildError, LintError) as exc:
        console.print(f"[red]Error:[/red] {escape(type(exc).__name__)} (exit {exc.returncode})")
        if exc.stderr:
            console.print(escape(exc.stderr.rstrip()))
        raise typer.Exit(1) from exc
    except ToolError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


@app.command()
def check(
    ctx: typer.Context,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Treat warnings as failures."),
    ] = False,
) -> None:
    """Validate the header and body of every content item."""
    config = _config(ctx)
    if not config.content_path.is_dir():
        console.print(
            f"[red]Error:[/red] content directory not found: {escape(str(config.content_path))}"
        )
        raise typer.Exit(1)

    report = validate_corpus(ContentStore(config.content_path))

    _print_issues(report.issues, config)
    console.print(
        f"Checked {report.checked} file(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if not report.passed(strict=strict):
        raise typer.Exit(1)


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    drafts: Annotated[
        bool,
        typer.Option("--drafts/--no-drafts", help="Include draft posts."),
    ] = True,
) -> None:
    """List posts, newest first."""
    config = _config(ctx)
    store = ContentStore(config.content_path)
    items = store.list(include_drafts=drafts)

    if not items:
        console.print("[yellow]No content items found.[/yellow]")
        console.print(f"Searched in: {escape(str(config.content_path))}")
        raise typer.Exit(0)

    table = Table(title="Posts")
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Draft")
    table.add_column("URL")
    for item in items:
        table.add_row(
            item.date.strftime("%Y-%m-%d"),
            escape(item.title),
            "yes" if item.draft else "",
            escape(item.url_path),
        )
    console.print(table)

    failures = store.load().failures
    if failures:
        console.print(
            f"[yellow]{len(failures)} file(s) could not be parsed; "
            "run 'blogkit check'.[/yellow]"
        )


@app.command()
def new(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Title of the new post.")],
    section: Annotated[
        Optional[str],
        typer.Option("--section", "-s", help="Content section. Defaults to the config value."),
    ] = None,
    bundle: Annotated[
        bool,
        typer.Option("--bundle", help="Create a page bundle (<slug>/index.md)."),
    ] = False,
    publish: Annotated[
        bool,
        typer.Option("--publish", help="Create the post with draft = false."),
    ] = False,
    header_format: Annotated[
        Optional[HeaderFormat],
        typer.Option("--format", "-f", help="Front matter format."),
    ] = None,
) -> None:
    """Scaffold a new post with a well-formed header."""
    config = _config(ctx)
    store = ContentStore(config.content_path)
    try:
        path = store.create(
            title,
            draft=not publish,
            section=config.content.default_section if section is None else section,
            fmt=header_format or config.content.header_format,
            bundle=bundle,
        )
    except (ContentExistsError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    console.print(f"[green]Created[/green] {escape(_rel(path, config))}")


@app.command()
def build(
    ctx: typer.Context,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", "-D", help="Include draft posts in the output."),
    ] = False,
    run_check: Annotated[
        bool,
        typer.Option("--check/--no-check", help="Validate content before building."),
    ] = True,
    verify_drafts: Annotated[
        bool,
        typer.Option(
            "--verify-drafts/--no-verify-drafts",
            help="Inspect the output for draft pages that should (not) be there.",
        ),
    ] = True,
    verify_idempotence: Annotated[
        bool,
        typer.Option(
            "--verify-idempotent",
            help="Build twice into scratch directories and compare the trees.",
        ),
    ] = False,
) -> None:
    """Render the site with the external generator."""
    config = _config(ctx)
    store = ContentStore(config.content_path)

    if run_check:
        report = validate_corpus(store)
        if report.errors:
            _print_issues(report.errors, config)
            console.print(f"[red]Build aborted:[/red] {len(report.errors)} content error(s)")
            raise typer.Exit(1)

    generator = Generator(config)
    with _tool_errors():
        result = generator.build(include_drafts=drafts)

    console.print(f"[bold green]Build complete![/bold green] Output: {escape(str(result.output_dir))}")
    console.print(f"  Digest: {tree_digest(result.output_dir)}")

    failed = False
    if verify_drafts:
        issues = check_draft_visibility(store.load().items, result.output_dir, include_drafts=drafts)
        _print_issues(issues, config)
        failed = any(i.severity == Severity.ERROR for i in issues)

    if verify_idempotence:
        with _tool_errors():
            outcome = verify_idempotent(generator, include_drafts=drafts)
        if outcome.identical:
            console.print("[green]Consecutive builds are identical.[/green]")
        else:
            console.print("[red]Consecutive builds differ.[/red]")
            console.print(f"  {outcome.first}")
            console.print(f"  {outcome.second}")
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def serve(
    ctx: typer.Context,
    drafts: Annotated[
        bool,
        typer.Option("--drafts/--no-drafts", help="Include draft posts in the preview."),
    ] = True,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port for the preview server."),
    ] = None,
    bind: Annotated[
        Optional[str],
        typer.Option("--bind", help="Interface for the preview server."),
    ] = None,
) -> None:
    """Run the generator's live-reload preview server."""
    config = _config(ctx)
    with _tool_errors():
        code = Generator(config).serve(include_drafts=drafts, port=port, bind=bind)
    raise typer.Exit(code)


@app.command()
def lint(
    ctx: typer.Context,
    glob: Annotated[
        Optional[str],
        typer.Argument(help="Files to lint, relative to the site root."),
    ] = None,
    local: Annotated[
        Optional[bool],
        typer.Option(
            "--local/--container",
            help="Run a local markdownlint instead of the container image.",
        ),
    ] = None,
) -> None:
    """Check markdown style with markdownlint."""
    config = _config(ctx)
    if local is not None:
        config = merge_cli_overrides(config, lint_container=not local)

    with _tool_errors():
        report = MarkdownLinter(config).run(glob)

    if report.passed:
        console.print("[green]No style violations.[/green]")
        return

    for diag in report.diagnostics:
        console.print(escape(str(diag)))
    for line in report.unparsed:
        console.print(escape(line))
    console.print(
        f"[red]{len(report.diagnostics)} violation(s)[/red] in {len(report.files)} file(s)"
    )
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
