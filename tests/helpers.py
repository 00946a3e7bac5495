"""Shared test helpers: transcript and index builders."""

from pathlib import Path

import orjson


def write_jsonl(path: Path, records) -> Path:
    """Write records as JSON lines. str records are written verbatim."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    for record in records:
        if isinstance(record, str):
            lines.append(record)
        else:
            lines.append(orjson.dumps(record).decode())
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def user_event(timestamp, text="hello", **extra) -> dict:
    event = {
        "type": "user",
        "message": {"role": "user", "content": text},
    }
    if timestamp is not None:
        event["timestamp"] = timestamp
    event.update(extra)
    return event


def assistant_event(timestamp, model="claude-sonnet-4-5", usage=None, tools=(), text="ok", **extra) -> dict:
    content = [{"type": "text", "text": text}]
    for name in tools:
        content.append({"type": "tool_use", "id": f"toolu_{name}", "name": name, "input": {"arg": 1}})
    message = {"role": "assistant", "content": content}
    if model:
        message["model"] = model
    if usage is not None:
        message["usage"] = usage
    event = {"type": "assistant", "message": message}
    if timestamp is not None:
        event["timestamp"] = timestamp
    event.update(extra)
    return event


def usage(input_tokens=0, output_tokens=0, cache_read=0, cache_creation=0) -> dict:
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "cache_read_input_tokens": cache_read,
        "cache_creation_input_tokens": cache_creation,
    }


def index_entry(session_id, created, modified=None, message_count=1, **extra) -> dict:
    entry = {
        "sessionId": session_id,
        "fullPath": "",
        "fileMtime": 0,
        "firstPrompt": f"prompt for {session_id}",
        "messageCount": message_count,
        "created": created,
        "modified": modified or created,
        "gitBranch": "",
        "projectPath": "",
        "isSidechain": False,
    }
    entry.update(extra)
    return entry


def write_index(project_dir: Path, entries, original_path="") -> Path:
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / "sessions-index.json"
    path.write_bytes(orjson.dumps({
        "version": 1,
        "entries": entries,
        "originalPath": original_path,
    }))
    return path
