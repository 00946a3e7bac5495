"""Services for Claude Code Summary."""

from claude_code_summary.services.history import load_history
from claude_code_summary.services.jsonl_parser import parse_events, stream_events
from claude_code_summary.services.session_detail import parse_session_detail
from claude_code_summary.services.session_index import SessionIndexResolver
from claude_code_summary.services.session_stats import scan_session_stats
from claude_code_summary.services.stats_aggregator import StatsBuilder, compute_stats
from claude_code_summary.services.stats_cache import StatsCacheStore

__all__ = [
    "load_history",
    "parse_events",
    "stream_events",
    "parse_session_detail",
    "SessionIndexResolver",
    "scan_session_stats",
    "StatsBuilder",
    "compute_stats",
    "StatsCacheStore",
]
