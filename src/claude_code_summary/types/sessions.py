"""Session and project metadata types."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from claude_code_summary.types.events import TokenUsage
from claude_code_summary.utils.json_values import as_int


@dataclass(frozen=True)
class SessionStats:
    """Lightweight per-session facts gathered by one pass over a transcript."""

    session_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    user_messages: int = 0
    assistant_messages: int = 0
    tool_calls: int = 0
    usage_by_model: dict[str, TokenUsage] = field(default_factory=dict)
    model: str = ""

    @property
    def total_messages(self) -> int:
        return self.user_messages + self.assistant_messages

    @property
    def duration_ms(self) -> int:
        if self.started_at is None or self.ended_at is None:
            return 0
        return (self.ended_at - self.started_at) // timedelta(milliseconds=1)


@dataclass
class SessionMessage:
    seq: int
    timestamp: Optional[datetime]
    role: str
    content: str


@dataclass
class SessionDetail:
    id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    user_messages: int = 0
    assistant_messages: int = 0
    usage_by_model: dict[str, TokenUsage] = field(default_factory=dict)
    model: str = ""
    tools: dict[str, int] = field(default_factory=dict)
    messages: list[SessionMessage] = field(default_factory=list)
    git_branch: str = ""
    version: str = ""
    is_sidechain: bool = False

    @property
    def total_messages(self) -> int:
        return self.user_messages + self.assistant_messages

    @property
    def input_tokens(self) -> int:
        return sum(u.input_tokens for u in self.usage_by_model.values())

    @property
    def output_tokens(self) -> int:
        return sum(u.output_tokens for u in self.usage_by_model.values())


@dataclass
class SessionEntry:
    session_id: str
    full_path: str = ""
    file_mtime: int = 0
    first_prompt: str = ""
    message_count: int = 0
    created: str = ""
    modified: str = ""
    git_branch: str = ""
    project_path: str = ""
    is_sidechain: bool = False

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SessionEntry":
        return cls(
            session_id=str(raw.get("sessionId") or ""),
            full_path=str(raw.get("fullPath") or ""),
            file_mtime=as_int(raw.get("fileMtime")),
            first_prompt=str(raw.get("firstPrompt") or ""),
            message_count=as_int(raw.get("messageCount")),
            created=str(raw.get("created") or ""),
            modified=str(raw.get("modified") or ""),
            git_branch=str(raw.get("gitBranch") or ""),
            project_path=str(raw.get("projectPath") or ""),
            is_sidechain=bool(raw.get("isSidechain", False)),
        )


@dataclass
class SessionIndex:
    version: int = 0
    entries: list[SessionEntry] = field(default_factory=list)
    original_path: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SessionIndex":
        entries = raw.get("entries") or []
        if not isinstance(entries, list):
            raise ValueError("entries is not a list")
        return cls(
            version=as_int(raw.get("version")),
            entries=[SessionEntry.from_dict(e) for e in entries if isinstance(e, dict)],
            original_path=str(raw.get("originalPath") or ""),
        )


@dataclass
class Project:
    dir_name: str
    path: str
    session_count: int = 0
    message_count: int = 0
    last_active: Optional[datetime] = None
    has_index: bool = False


@dataclass
class SessionLookup:
    path: str
    # None when the match came from a transcript filename
    entry: Optional[SessionEntry] = None


@dataclass
class HistoryEntry:
    display: str
    timestamp: int = 0  # epoch milliseconds
    project: str = ""
