"""Reader for the global prompt history file (``history.jsonl``)."""

from pathlib import Path

from claude_code_summary.services.jsonl_parser import iter_json_lines
from claude_code_summary.types.sessions import HistoryEntry
from claude_code_summary.utils.json_values import as_int, as_str


def load_history(file_path: str | Path, limit: int = 0) -> list[HistoryEntry]:
    """Return the last ``limit`` prompts (all of them when limit <= 0).

    Entries without display text are dropped. OSError propagates when the
    file cannot be opened.
    """
    entries = []
    for raw in iter_json_lines(file_path):
        display = as_str(raw.get("display"))
        if not display:
            continue
        entries.append(HistoryEntry(
            display=display,
            timestamp=as_int(raw.get("timestamp")),
            project=as_str(raw.get("project")),
        ))

    if limit > 0 and len(entries) > limit:
        entries = entries[-limit:]
    return entries
