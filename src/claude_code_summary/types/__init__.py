"""Type definitions for Claude Code Summary."""

from claude_code_summary.types.events import (
    AssistantEvent,
    AssistantMessage,
    ContentBlock,
    EventKind,
    OtherBlock,
    OtherEvent,
    RawEvent,
    TextBlock,
    TokenUsage,
    ToolUseBlock,
    UserEvent,
)
from claude_code_summary.types.sessions import (
    HistoryEntry,
    Project,
    SessionDetail,
    SessionEntry,
    SessionIndex,
    SessionLookup,
    SessionMessage,
    SessionStats,
)
from claude_code_summary.types.stats import (
    DailyActivity,
    DailyModelTokens,
    LongestSession,
    ModelUsage,
    StatsCache,
)

__all__ = [
    "AssistantEvent",
    "AssistantMessage",
    "ContentBlock",
    "EventKind",
    "OtherBlock",
    "OtherEvent",
    "RawEvent",
    "TextBlock",
    "TokenUsage",
    "ToolUseBlock",
    "UserEvent",
    "HistoryEntry",
    "Project",
    "SessionDetail",
    "SessionEntry",
    "SessionIndex",
    "SessionLookup",
    "SessionMessage",
    "SessionStats",
    "DailyActivity",
    "DailyModelTokens",
    "LongestSession",
    "ModelUsage",
    "StatsCache",
]
