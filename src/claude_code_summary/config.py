"""Data locations, report defaults and logging setup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "claude_code_summary"

# Default values
DEFAULTS = {
    "sessions/limit": 20,
    "period/sessionLimit": 15,
    "tokens/days": 14,
    "summary/peakHours": 5,
    "session/promptsShown": 10,
    "history/limit": 20,
    "truncate/sessionPrompt": 55,
    "truncate/periodPrompt": 50,
    "truncate/detailPrompt": 70,
    "logging/level": "WARNING",
}


@dataclass
class Settings:
    claude_dir: Path
    projects_dir: Path
    stats_cache_path: Path
    history_path: Path

    @classmethod
    def from_claude_dir(cls, claude_dir: str | Path) -> "Settings":
        base = Path(claude_dir)
        return cls(
            claude_dir=base,
            projects_dir=base / "projects",
            stats_cache_path=base / "stats-cache.json",
            history_path=base / "history.jsonl",
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Locate ``~/.claude``, honoring ``CLAUDE_CONFIG_DIR``."""
        env = os.environ if environ is None else environ
        override = env.get("CLAUDE_CONFIG_DIR")
        if override:
            return cls.from_claude_dir(Path(override).expanduser())
        return cls.from_claude_dir(Path.home() / ".claude")


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """Send package logs to stderr at ``CCS_LOG_LEVEL`` (default WARNING)."""
    env = os.environ if environ is None else environ
    logger = logging.getLogger(LOGGER_NAME)

    level_name = env.get("CCS_LOG_LEVEL", DEFAULTS["logging/level"]).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
