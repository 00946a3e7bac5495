"""Command-line dispatch for ``ccs``."""

import argparse
import logging
import sys
from typing import Callable, Mapping, Optional, Sequence, TextIO

from claude_code_summary import __version__, commands
from claude_code_summary.config import DEFAULTS, Settings, configure_logging
from claude_code_summary.errors import ReportError, UsageError
from claude_code_summary.render.context import OutputMode, ReportContext, make_console
from claude_code_summary.utils.periods import Period

logger = logging.getLogger(__name__)

HELP_TEXT = """\
ccs {version} - Claude Code Summary

Usage: ccs [command] [flags]

Commands:
  all              Full report (summary + projects + sessions + tokens)
  summary          Dashboard overview (default)
  today            Today's activity
  week             This week's activity
  month            This month's activity
  projects         Project ranking by activity
  sessions         List recent sessions
  session <id>     Session detail view
  tokens           Token usage breakdown
  history          Recent prompts from history.jsonl
  refresh          Rebuild the stats cache from session logs
  version          Show version
  help             Show this help

Global flags:
  --json           Output as JSON
  --md             Output as Markdown

Flags (sessions):
  --project=X      Filter by project name
  -n N             Limit number of results (default: {limit})

Flags (history):
  -n N             Number of prompts (default: {history_limit})

Environment:
  NO_COLOR           Disable colored output
  CLAUDE_CONFIG_DIR  Data directory (default: ~/.claude)
  CCS_LOG_LEVEL      Log level for diagnostics (default: WARNING)
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Parser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(f"{self.prog}: {message}")


def _sessions_parser() -> _ArgumentParser:
    parser = _ArgumentParser(prog="ccs sessions", add_help=False)
    parser.add_argument("--project", default="")
    parser.add_argument("-n", dest="limit", type=int, default=DEFAULTS["sessions/limit"])
    return parser


def _history_parser() -> _ArgumentParser:
    parser = _ArgumentParser(prog="ccs history", add_help=False)
    parser.add_argument("-n", dest="limit", type=int, default=DEFAULTS["history/limit"])
    return parser


def _session_parser() -> _ArgumentParser:
    parser = _ArgumentParser(prog="ccs session", add_help=False)
    parser.add_argument("id_prefix")
    return parser


def split_output_flags(argv: Sequence[str]) -> tuple[OutputMode, list[str]]:
    """Pull ``--json``/``--md`` out of argv wherever they appear; last one wins."""
    mode = OutputMode.TERMINAL
    rest = []
    for arg in argv:
        if arg == "--json":
            mode = OutputMode.JSON
        elif arg == "--md":
            mode = OutputMode.MARKDOWN
        else:
            rest.append(arg)
    return mode, rest


def print_help(out: TextIO):
    out.write(HELP_TEXT.format(
        version=__version__,
        limit=DEFAULTS["sessions/limit"],
        history_limit=DEFAULTS["history/limit"],
    ))


def _run_sessions(ctx: ReportContext, args: list[str]):
    opts = _sessions_parser().parse_args(args)
    commands.sessions(ctx, project=opts.project, limit=opts.limit)


def _run_session(ctx: ReportContext, args: list[str]):
    opts = _session_parser().parse_args(args[:1])
    commands.session_detail(ctx, opts.id_prefix)


def _run_history(ctx: ReportContext, args: list[str]):
    opts = _history_parser().parse_args(args)
    commands.history(ctx, limit=opts.limit)


def _period(period: Period) -> Callable[[ReportContext, list[str]], None]:
    return lambda ctx, args: commands.period_report(ctx, period)


COMMANDS: dict[str, Callable[[ReportContext, list[str]], None]] = {
    "all": lambda ctx, args: commands.all_reports(ctx),
    "summary": lambda ctx, args: commands.summary(ctx),
    "today": _period(Period.TODAY),
    "week": _period(Period.WEEK),
    "month": _period(Period.MONTH),
    "projects": lambda ctx, args: commands.projects(ctx),
    "sessions": _run_sessions,
    "session": _run_session,
    "tokens": lambda ctx, args: commands.tokens(ctx),
    "history": _run_history,
    "refresh": lambda ctx, args: commands.refresh(ctx),
}


def main(
    argv: Optional[Sequence[str]] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run one ``ccs`` command and return the process exit code."""
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    configure_logging(environ)

    mode, args = split_output_flags(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else "summary"

    if command in ("version", "--version", "-v"):
        stdout.write(f"ccs {__version__}\n")
        return 0
    if command in ("help", "--help", "-h"):
        print_help(stdout)
        return 0

    handler = COMMANDS.get(command)
    if handler is None:
        stderr.write(f"Unknown command: {command}\n")
        print_help(stderr)
        return 1

    ctx = ReportContext(
        settings=Settings.from_env(environ),
        mode=mode,
        out=stdout,
        console=make_console(stdout, environ),
    )
    try:
        handler(ctx, args[1:])
    except ReportError as e:
        logger.debug("Command %s failed", command, exc_info=True)
        stderr.write(f"Error: {e}\n")
        return 1
    return 0
