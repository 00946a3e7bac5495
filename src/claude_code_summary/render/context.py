"""Per-invocation output settings threaded through every report."""

import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Mapping, Optional, TextIO

from rich.console import Console

from claude_code_summary.config import Settings


class OutputMode(str, Enum):
    TERMINAL = "terminal"
    JSON = "json"
    MARKDOWN = "md"


def make_console(stream: TextIO, environ: Optional[Mapping[str, str]] = None) -> Console:
    """Console for terminal reports.

    Styling is off when NO_COLOR is set to anything, and rich leaves it off
    whenever the stream is not a terminal.
    """
    env = os.environ if environ is None else environ
    return Console(
        file=stream,
        color_system=None if "NO_COLOR" in env else "auto",
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


@dataclass
class ReportContext:
    settings: Settings
    mode: OutputMode = OutputMode.TERMINAL
    out: TextIO = field(default_factory=lambda: sys.stdout)
    console: Optional[Console] = None
    # Reference clock and zone; None means the machine's local time.
    now: Optional[datetime] = None
    tz: Optional[tzinfo] = None

    def __post_init__(self):
        if self.console is None:
            self.console = make_console(self.out)

    @property
    def is_json(self) -> bool:
        return self.mode is OutputMode.JSON

    @property
    def is_markdown(self) -> bool:
        return self.mode is OutputMode.MARKDOWN

    def current_time(self) -> datetime:
        if self.now is not None:
            return self.now.astimezone(self.tz)
        return datetime.now(self.tz).astimezone(self.tz)
