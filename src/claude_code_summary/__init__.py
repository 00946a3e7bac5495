"""Usage reports from local Claude Code session logs."""

__version__ = "0.1.0"
