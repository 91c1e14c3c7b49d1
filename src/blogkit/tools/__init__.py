"""External tool invocation."""

from blogkit.tools.runner import ToolResult, run_tool

__all__ = ["ToolResult", "run_tool"]
