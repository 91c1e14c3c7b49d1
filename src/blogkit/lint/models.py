"""Lint report models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LintDiagnostic(BaseModel):
    """One style violation reported by the linter."""

    path: str
    line: int
    column: int | None = None
    rule: str
    aliases: list[str] = Field(default_factory=list)
    message: str

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}"
        if self.column is not None:
            location += f":{self.column}"
        rule = "/".join([self.rule, *self.aliases])
        return f"{location} {rule} {self.message}"


class LintReport(BaseModel):
    """Outcome of one lint invocation."""

    command: list[str]
    returncode: int
    diagnostics: list[LintDiagnostic] = Field(default_factory=list)
    unparsed: list[str] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.returncode == 0

    @property
    def files(self) -> list[str]:
        """Files with at least one diagnostic, sorted."""
        return sorted({d.path for d in self.diagnostics})
