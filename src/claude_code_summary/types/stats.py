"""Aggregate statistics persisted in the stats cache file."""

from dataclasses import dataclass, field
from typing import Any

from claude_code_summary.utils.json_values import as_int, as_str

STATS_CACHE_VERSION = 1


@dataclass
class DailyActivity:
    date: str
    message_count: int = 0
    session_count: int = 0
    tool_call_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "messageCount": self.message_count,
            "sessionCount": self.session_count,
            "toolCallCount": self.tool_call_count,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "DailyActivity":
        return cls(
            date=as_str(raw.get("date")),
            message_count=as_int(raw.get("messageCount")),
            session_count=as_int(raw.get("sessionCount")),
            tool_call_count=as_int(raw.get("toolCallCount")),
        )


@dataclass
class DailyModelTokens:
    date: str
    tokens_by_model: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.tokens_by_model.values())

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "tokensByModel": dict(self.tokens_by_model)}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "DailyModelTokens":
        by_model = raw.get("tokensByModel") or {}
        return cls(
            date=as_str(raw.get("date")),
            tokens_by_model={str(k): as_int(v) for k, v in by_model.items()},
        )


@dataclass
class ModelUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "cacheReadInputTokens": self.cache_read_input_tokens,
            "cacheCreationInputTokens": self.cache_creation_input_tokens,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ModelUsage":
        return cls(
            input_tokens=as_int(raw.get("inputTokens")),
            output_tokens=as_int(raw.get("outputTokens")),
            cache_read_input_tokens=as_int(raw.get("cacheReadInputTokens")),
            cache_creation_input_tokens=as_int(raw.get("cacheCreationInputTokens")),
        )


@dataclass
class LongestSession:
    session_id: str = ""
    duration: int = 0  # milliseconds
    message_count: int = 0
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "duration": self.duration,
            "messageCount": self.message_count,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "LongestSession":
        return cls(
            session_id=as_str(raw.get("sessionId")),
            duration=as_int(raw.get("duration")),
            message_count=as_int(raw.get("messageCount")),
            timestamp=as_str(raw.get("timestamp")),
        )


@dataclass
class StatsCache:
    """Snapshot written by ``refresh`` and read by every report."""

    version: int = STATS_CACHE_VERSION
    last_computed_date: str = ""
    daily_activity: list[DailyActivity] = field(default_factory=list)
    daily_model_tokens: list[DailyModelTokens] = field(default_factory=list)
    model_usage: dict[str, ModelUsage] = field(default_factory=dict)
    total_sessions: int = 0
    total_messages: int = 0
    longest_session: LongestSession = field(default_factory=LongestSession)
    first_session_date: str = ""
    hour_counts: dict[str, int] = field(default_factory=dict)

    def find_day(self, date: str) -> DailyActivity | None:
        for day in self.daily_activity:
            if day.date == date:
                return day
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "lastComputedDate": self.last_computed_date,
            "dailyActivity": [d.to_dict() for d in self.daily_activity],
            "dailyModelTokens": [d.to_dict() for d in self.daily_model_tokens],
            "modelUsage": {m: u.to_dict() for m, u in self.model_usage.items()},
            "totalSessions": self.total_sessions,
            "totalMessages": self.total_messages,
            "longestSession": self.longest_session.to_dict(),
            "firstSessionDate": self.first_session_date,
            "hourCounts": dict(self.hour_counts),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "StatsCache":
        """Build a cache from its JSON shape.

        Raises TypeError/AttributeError when a nested value has the wrong
        JSON type; callers turn those into StatsCacheError.
        """
        return cls(
            version=as_int(raw.get("version")),
            last_computed_date=as_str(raw.get("lastComputedDate")),
            daily_activity=[
                DailyActivity.from_dict(d) for d in raw.get("dailyActivity") or []
            ],
            daily_model_tokens=[
                DailyModelTokens.from_dict(d) for d in raw.get("dailyModelTokens") or []
            ],
            model_usage={
                str(m): ModelUsage.from_dict(u)
                for m, u in (raw.get("modelUsage") or {}).items()
            },
            total_sessions=as_int(raw.get("totalSessions")),
            total_messages=as_int(raw.get("totalMessages")),
            longest_session=LongestSession.from_dict(raw.get("longestSession") or {}),
            first_session_date=as_str(raw.get("firstSessionDate")),
            hour_counts={
                str(h): as_int(c) for h, c in (raw.get("hourCounts") or {}).items()
            },
        )
