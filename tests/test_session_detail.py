"""Tests for the full single-session parse."""

from claude_code_summary.services.session_detail import parse_session_detail
from helpers import assistant_event, usage, user_event, write_jsonl


def test_tools_session_detail(tools_session_path):
    detail = parse_session_detail(tools_session_path)

    assert detail.id == "tools-0001"
    assert detail.user_messages == 3
    assert detail.assistant_messages == 3
    assert detail.total_messages == 6
    assert detail.tools == {"Read": 1, "Edit": 1, "Bash": 1}
    assert detail.git_branch == "main"
    assert detail.version == "1.0.30"
    assert detail.model == "claude-sonnet-4-5"
    assert detail.input_tokens == 22
    assert detail.output_tokens == 90
    assert detail.is_sidechain is False


def test_messages_in_file_order(tools_session_path):
    detail = parse_session_detail(tools_session_path)

    assert [m.seq for m in detail.messages] == list(range(6))
    assert [m.role for m in detail.messages] == ["user", "assistant"] * 3
    assert detail.messages[0].content == "Read main.py and fix the bug on line 42."
    assert detail.messages[1].content == "Let me read the file."
    # Tool results carry no prompt text.
    assert detail.messages[2].content == ""
    assert detail.messages[3].content == ""


def test_user_prompts(tools_session_path):
    detail = parse_session_detail(tools_session_path)
    prompts = [m.content for m in detail.messages if m.role == "user" and m.content]
    assert prompts == ["Read main.py and fix the bug on line 42."]


def test_sidechain_and_stem_id(tmp_path):
    path = write_jsonl(tmp_path / "agent-1.jsonl", [
        user_event("2024-05-01T10:00:00Z", text="go", isSidechain=True),
        assistant_event("2024-05-01T10:00:10Z", usage=usage(1, 2), tools=["Grep", "Grep"]),
    ])
    detail = parse_session_detail(path)

    assert detail.id == "agent-1"
    assert detail.is_sidechain is True
    assert detail.tools == {"Grep": 2}
    assert detail.started_at.minute == 0
    assert detail.ended_at.second == 10
