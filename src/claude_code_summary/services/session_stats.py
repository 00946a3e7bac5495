"""Lightweight per-session statistics for the aggregation pass."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from claude_code_summary.services.jsonl_parser import stream_events
from claude_code_summary.types.events import (
    AssistantEvent,
    TokenUsage,
    ToolUseBlock,
    UserEvent,
)
from claude_code_summary.types.sessions import SessionStats

# Bucket for usage reported before any model id appears in a session.
UNKNOWN_MODEL = "unknown"


def scan_session_stats(file_path: str | Path) -> SessionStats:
    """Scan one transcript for message, tool and token counts.

    Message text is never kept. Usage is attributed to the most recent model
    seen in the file. Raises OSError or TranscriptReadError when the file
    cannot be read.
    """
    path = Path(file_path)
    session_id = path.stem
    explicit_id = ""
    first_ts: Optional[datetime] = None
    last_ts: Optional[datetime] = None
    user_messages = 0
    assistant_messages = 0
    tool_calls = 0
    model = ""
    usage_by_model: dict[str, TokenUsage] = {}

    for event in stream_events(path):
        if event.session_id and not explicit_id:
            explicit_id = event.session_id

        if event.timestamp is not None:
            if first_ts is None:
                first_ts = event.timestamp
            last_ts = event.timestamp

        if isinstance(event, UserEvent):
            user_messages += 1
        elif isinstance(event, AssistantEvent):
            assistant_messages += 1
            message = event.message
            if message is None:
                continue

            if message.model:
                model = message.model

            if message.usage is not None:
                bucket = usage_by_model.setdefault(model or UNKNOWN_MODEL, TokenUsage())
                bucket += message.usage

            tool_calls += sum(1 for b in message.content if isinstance(b, ToolUseBlock))

    return SessionStats(
        session_id=explicit_id or session_id,
        started_at=first_ts,
        ended_at=last_ts,
        user_messages=user_messages,
        assistant_messages=assistant_messages,
        tool_calls=tool_calls,
        usage_by_model=usage_by_model,
        model=model,
    )
