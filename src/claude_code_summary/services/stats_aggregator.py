"""Rebuild the stats cache by scanning every session transcript."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Optional

from claude_code_summary.errors import ProjectsRootError, TranscriptReadError
from claude_code_summary.services.jsonl_parser import format_rfc3339
from claude_code_summary.services.session_stats import scan_session_stats
from claude_code_summary.types.sessions import SessionStats
from claude_code_summary.types.stats import (
    STATS_CACHE_VERSION,
    DailyActivity,
    DailyModelTokens,
    LongestSession,
    ModelUsage,
    StatsCache,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def discover_session_files(projects_root: str | Path) -> list[Path]:
    """List ``<root>/<project>/*.jsonl`` files, one level of project dirs.

    Raises ProjectsRootError when the root cannot be listed.
    """
    root = Path(projects_root)
    try:
        entries = sorted(root.iterdir())
    except OSError as e:
        raise ProjectsRootError(f"reading projects dir {root}: {e}") from e

    files: list[Path] = []
    for entry in entries:
        if not entry.is_dir():
            continue
        files.extend(sorted(entry.glob("*.jsonl")))
    return files


@dataclass
class _DailyBucket:
    messages: int = 0
    sessions: int = 0
    tool_calls: int = 0
    output_by_model: dict[str, int] = field(default_factory=dict)


class StatsBuilder:
    """Accumulates SessionStats into the running aggregates of a StatsCache."""

    def __init__(self, tz: Optional[tzinfo] = None):
        # None means the local zone of the machine
        self._tz = tz
        self._days: dict[str, _DailyBucket] = {}
        self._models: dict[str, ModelUsage] = {}
        self._hours: dict[int, int] = {}
        self._total_sessions = 0
        self._total_messages = 0
        self._first_date = ""
        self._longest = LongestSession()

    def add(self, stats: SessionStats) -> bool:
        """Fold one session in. Returns False for sessions with no messages."""
        msg_count = stats.total_messages
        if msg_count == 0:
            return False

        self._total_sessions += 1
        self._total_messages += msg_count

        date = ""
        local_start = None
        if stats.started_at is not None:
            try:
                local_start = stats.started_at.astimezone(self._tz)
            except (OverflowError, ValueError) as e:
                logger.debug("No local date for session %s: %s", stats.session_id, e)
        if local_start is not None:
            date = local_start.strftime("%Y-%m-%d")
            if not self._first_date or date < self._first_date:
                self._first_date = date
            self._hours[local_start.hour] = self._hours.get(local_start.hour, 0) + 1

        day = None
        if date:
            day = self._days.setdefault(date, _DailyBucket())
            day.sessions += 1
            day.messages += msg_count
            day.tool_calls += stats.tool_calls

        for model, usage in stats.usage_by_model.items():
            if day is not None:
                day.output_by_model[model] = (
                    day.output_by_model.get(model, 0) + usage.output_tokens
                )
            total = self._models.setdefault(model, ModelUsage())
            total.input_tokens += usage.input_tokens
            total.output_tokens += usage.output_tokens
            total.cache_read_input_tokens += usage.cache_read_input_tokens
            total.cache_creation_input_tokens += usage.cache_creation_input_tokens

        if stats.started_at is not None and stats.ended_at is not None:
            duration = stats.duration_ms
            if duration > self._longest.duration:
                self._longest = LongestSession(
                    session_id=stats.session_id,
                    duration=duration,
                    message_count=msg_count,
                    timestamp=format_rfc3339(stats.started_at),
                )
        return True

    def build(self, now: Optional[datetime] = None) -> StatsCache:
        """Materialize the aggregates into a date-ordered StatsCache."""
        if now is None:
            now = datetime.now(self._tz)
        dates = sorted(self._days)

        first_session = self._first_date
        if first_session and "T" not in first_session:
            first_session += "T00:00:00Z"

        return StatsCache(
            version=STATS_CACHE_VERSION,
            last_computed_date=now.astimezone(self._tz).strftime("%Y-%m-%d"),
            daily_activity=[
                DailyActivity(
                    date=d,
                    message_count=self._days[d].messages,
                    session_count=self._days[d].sessions,
                    tool_call_count=self._days[d].tool_calls,
                )
                for d in dates
            ],
            daily_model_tokens=[
                DailyModelTokens(date=d, tokens_by_model=dict(self._days[d].output_by_model))
                for d in dates
                if self._days[d].output_by_model
            ],
            model_usage={m: self._models[m] for m in sorted(self._models)},
            total_sessions=self._total_sessions,
            total_messages=self._total_messages,
            longest_session=self._longest,
            first_session_date=first_session,
            hour_counts={str(h): self._hours[h] for h in sorted(self._hours)},
        )


def compute_stats(
    projects_root: str | Path,
    progress: Optional[ProgressCallback] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> StatsCache:
    """Scan every session file under projects_root into a fresh StatsCache.

    Unreadable or oversized transcripts are skipped. ``progress`` is called
    with (done, total) after each file.
    """
    files = discover_session_files(projects_root)
    total = len(files)
    builder = StatsBuilder(tz=tz)
    skipped = 0

    for i, path in enumerate(files, start=1):
        try:
            stats = scan_session_stats(path)
        except (OSError, TranscriptReadError) as e:
            skipped += 1
            logger.warning("Skipping session %s: %s", path, e)
            stats = None

        if stats is not None:
            builder.add(stats)

        if progress is not None:
            progress(i, total)

    if skipped:
        logger.info("Skipped %d of %d session files", skipped, total)
    return builder.build(now=now)
