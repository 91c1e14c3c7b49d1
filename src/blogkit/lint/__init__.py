"""Lint invocation: containerized markdownlint wrapper."""

from blogkit.lint.markdownlint import MarkdownLinter, parse_output
from blogkit.lint.models import LintDiagnostic, LintReport

__all__ = ["LintDiagnostic", "LintReport", "MarkdownLinter", "parse_output"]
