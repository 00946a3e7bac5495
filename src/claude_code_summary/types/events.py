"""Decoded transcript events and their content blocks."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class EventKind(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    OTHER = "other"


@dataclass
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0

    @property
    def total(self) -> int:
        return (self.input_tokens + self.output_tokens +
                self.cache_read_input_tokens + self.cache_creation_input_tokens)

    def __iadd__(self, other: "TokenUsage") -> "TokenUsage":
        self.input_tokens += other.input_tokens
        self.output_tokens += other.output_tokens
        self.cache_read_input_tokens += other.cache_read_input_tokens
        self.cache_creation_input_tokens += other.cache_creation_input_tokens
        return self


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ToolUseBlock:
    # Tool arguments are dropped at decode time.
    name: str


@dataclass(frozen=True)
class OtherBlock:
    type: str


ContentBlock = Union[TextBlock, ToolUseBlock, OtherBlock]


@dataclass
class AssistantMessage:
    role: str = ""
    model: str = ""
    usage: Optional[TokenUsage] = None
    content: list[ContentBlock] = field(default_factory=list)


@dataclass
class _EventHeader:
    timestamp: Optional[datetime] = None
    session_id: str = ""
    git_branch: str = ""
    version: str = ""
    cwd: str = ""
    is_sidechain: bool = False


@dataclass
class UserEvent(_EventHeader):
    # str for plain prompts, list of blocks otherwise
    content: Any = ""
    kind: EventKind = field(default=EventKind.USER, init=False)


@dataclass
class AssistantEvent(_EventHeader):
    message: Optional[AssistantMessage] = None
    kind: EventKind = field(default=EventKind.ASSISTANT, init=False)


@dataclass
class OtherEvent(_EventHeader):
    type: str = ""
    kind: EventKind = field(default=EventKind.OTHER, init=False)


RawEvent = Union[UserEvent, AssistantEvent, OtherEvent]


def content_text(content: Any) -> str:
    """Join the text of a user or assistant content value."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [b.text for b in content if isinstance(b, TextBlock) and b.text]
        return "\n".join(parts)
    return ""
