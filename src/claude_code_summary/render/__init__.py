"""Report output in terminal, Markdown and JSON form."""

from claude_code_summary.render.context import OutputMode, ReportContext

__all__ = ["OutputMode", "ReportContext"]
