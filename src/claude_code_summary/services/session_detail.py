"""Full parse of a single session for the detail view."""

from pathlib import Path

from claude_code_summary.services.jsonl_parser import stream_events
from claude_code_summary.services.session_stats import UNKNOWN_MODEL
from claude_code_summary.types.events import (
    AssistantEvent,
    TokenUsage,
    ToolUseBlock,
    UserEvent,
    content_text,
)
from claude_code_summary.types.sessions import SessionDetail, SessionMessage


def parse_session_detail(file_path: str | Path) -> SessionDetail:
    """Parse a whole transcript, keeping message text and per-tool counts."""
    path = Path(file_path)
    detail = SessionDetail(id=path.stem)
    explicit_id = ""
    seq = 0

    for event in stream_events(path):
        if event.session_id and not explicit_id:
            explicit_id = event.session_id
        if event.version:
            detail.version = event.version
        if event.git_branch:
            detail.git_branch = event.git_branch
        if event.is_sidechain:
            detail.is_sidechain = True

        if event.timestamp is not None:
            if detail.started_at is None:
                detail.started_at = event.timestamp
            detail.ended_at = event.timestamp

        if isinstance(event, UserEvent):
            detail.user_messages += 1
            detail.messages.append(SessionMessage(
                seq=seq,
                timestamp=event.timestamp,
                role="user",
                content=content_text(event.content),
            ))
            seq += 1
        elif isinstance(event, AssistantEvent):
            detail.assistant_messages += 1
            text = ""
            message = event.message
            if message is not None:
                if message.model:
                    detail.model = message.model
                if message.usage is not None:
                    bucket = detail.usage_by_model.setdefault(
                        detail.model or UNKNOWN_MODEL, TokenUsage()
                    )
                    bucket += message.usage
                for block in message.content:
                    if isinstance(block, ToolUseBlock) and block.name:
                        detail.tools[block.name] = detail.tools.get(block.name, 0) + 1
                text = content_text(message.content)

            detail.messages.append(SessionMessage(
                seq=seq,
                timestamp=event.timestamp,
                role="assistant",
                content=text,
            ))
            seq += 1

    if explicit_id:
        detail.id = explicit_id
    return detail
