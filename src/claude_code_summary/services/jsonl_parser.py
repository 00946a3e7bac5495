"""Streaming JSONL reader for Claude Code transcript files."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

import orjson

from claude_code_summary.errors import TranscriptReadError
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
from claude_code_summary.utils.json_values import as_int, as_str

logger = logging.getLogger(__name__)

# Max size for a single JSONL line (32MB). Tool output can be huge.
MAX_LINE_SIZE = 32 * 1024 * 1024


def iter_json_lines(file_path: str | Path) -> Iterator[dict]:
    """Yield each JSON object line of a file.

    The file is read one bounded line at a time. Blank lines, malformed JSON
    and non-object values are skipped. A line longer than MAX_LINE_SIZE
    raises TranscriptReadError; OSError from opening the file propagates.
    """
    path = Path(file_path)
    line_num = 0
    with open(path, "rb") as f:
        while True:
            line = f.readline(MAX_LINE_SIZE + 1)
            if not line:
                break
            line_num += 1
            if len(line) > MAX_LINE_SIZE and not line.endswith(b"\n"):
                raise TranscriptReadError(
                    f"line {line_num} in {path} exceeds "
                    f"{MAX_LINE_SIZE // (1024 * 1024)}MB"
                )

            line = line.strip()
            if not line:
                continue

            try:
                raw = orjson.loads(line)
            except orjson.JSONDecodeError as e:
                logger.debug("Malformed JSON at line %d in %s: %s", line_num, path.name, e)
                continue

            if not isinstance(raw, dict):
                continue
            yield raw


def stream_events(file_path: str | Path) -> Iterator[RawEvent]:
    """Stream-decode a transcript file, yielding one RawEvent per valid line."""
    for raw in iter_json_lines(file_path):
        yield decode_event(raw)


def parse_events(file_path: str | Path) -> list[RawEvent]:
    """Decode an entire transcript file into a list of events."""
    return list(stream_events(file_path))


def decode_event(raw: dict) -> RawEvent:
    """Decode one transcript record, dispatching on its ``type`` field."""
    header = dict(
        timestamp=parse_timestamp(raw.get("timestamp")),
        session_id=as_str(raw.get("sessionId")),
        git_branch=as_str(raw.get("gitBranch")),
        version=as_str(raw.get("version")),
        cwd=as_str(raw.get("cwd")),
        is_sidechain=raw.get("isSidechain") is True,
    )

    type_str = as_str(raw.get("type"))
    message = raw.get("message")

    if type_str == EventKind.USER.value:
        content: Any = ""
        if isinstance(message, dict):
            content = message.get("content", "")
            if isinstance(content, list):
                content = decode_blocks(content)
            elif not isinstance(content, str):
                content = ""
        return UserEvent(content=content, **header)

    if type_str == EventKind.ASSISTANT.value:
        payload = None
        if isinstance(message, dict):
            payload = _decode_assistant_message(message)
        return AssistantEvent(message=payload, **header)

    return OtherEvent(type=type_str, **header)


def decode_blocks(blocks: list) -> list[ContentBlock]:
    result: list[ContentBlock] = []
    for block in blocks:
        if not isinstance(block, dict):
            continue
        block_type = as_str(block.get("type"))
        if block_type == "text":
            result.append(TextBlock(text=as_str(block.get("text"))))
        elif block_type == "tool_use":
            result.append(ToolUseBlock(name=as_str(block.get("name"))))
        else:
            result.append(OtherBlock(type=block_type))
    return result


def _decode_assistant_message(message: dict) -> AssistantMessage:
    usage = None
    raw_usage = message.get("usage")
    if isinstance(raw_usage, dict):
        usage = TokenUsage(
            input_tokens=as_int(raw_usage.get("input_tokens")),
            output_tokens=as_int(raw_usage.get("output_tokens")),
            cache_read_input_tokens=as_int(raw_usage.get("cache_read_input_tokens")),
            cache_creation_input_tokens=as_int(raw_usage.get("cache_creation_input_tokens")),
        )

    content = message.get("content")
    blocks = decode_blocks(content) if isinstance(content, list) else []

    return AssistantMessage(
        role=as_str(message.get("role")),
        model=as_str(message.get("model")),
        usage=usage,
        content=blocks,
    )


def parse_timestamp(ts_value: Any) -> Optional[datetime]:
    """Parse a timestamp into an aware datetime, or None if unusable.

    Accepts ISO 8601 strings ("2026-02-13T12:00:00.000Z", offsets, naive
    values taken as UTC) and epoch seconds or milliseconds.
    """
    if isinstance(ts_value, bool):
        return None
    if isinstance(ts_value, (int, float)):
        try:
            return datetime.fromtimestamp(
                ts_value / 1000 if ts_value > 1e12 else ts_value, tz=timezone.utc
            )
        except (ValueError, OverflowError, OSError):
            return None
    if isinstance(ts_value, str) and ts_value:
        try:
            dt = datetime.fromisoformat(ts_value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    return None


def format_rfc3339(dt: datetime) -> str:
    """Format an aware datetime as RFC 3339 with second precision."""
    base = dt.strftime("%Y-%m-%dT%H:%M:%S")
    offset = dt.utcoffset()
    if not offset:
        return base + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total) // 60, 60)
    return f"{base}{sign}{hours:02d}:{minutes:02d}"
