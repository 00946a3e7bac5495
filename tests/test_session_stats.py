"""Tests for the per-session statistics scan."""

from datetime import datetime, timezone

import pytest

from claude_code_summary.services.session_stats import UNKNOWN_MODEL, scan_session_stats
from claude_code_summary.types.events import TokenUsage
from helpers import assistant_event, usage, user_event, write_jsonl


def test_simple_session(simple_session_path):
    stats = scan_session_stats(simple_session_path)

    assert stats.session_id == "simple_session"
    assert stats.user_messages == 1
    assert stats.assistant_messages == 1
    assert stats.total_messages == 2
    assert stats.tool_calls == 0
    assert stats.started_at == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert stats.ended_at == datetime(2024, 1, 1, 10, 5, tzinfo=timezone.utc)
    assert stats.duration_ms == 5 * 60 * 1000
    assert stats.model == "claude-sonnet-4-5"
    assert stats.usage_by_model == {
        "claude-sonnet-4-5": TokenUsage(input_tokens=100, output_tokens=50),
    }


def test_tools_session(tools_session_path):
    stats = scan_session_stats(tools_session_path)

    assert stats.session_id == "tools-0001"
    assert stats.user_messages == 3
    assert stats.assistant_messages == 3
    assert stats.tool_calls == 3
    assert stats.model == "claude-sonnet-4-5"
    # Snapshot events still bound the session's time span.
    assert stats.started_at == datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)
    assert stats.ended_at == datetime(2024, 3, 10, 9, 3, tzinfo=timezone.utc)
    assert stats.usage_by_model == {
        "claude-opus-4-6": TokenUsage(
            input_tokens=15, output_tokens=50,
            cache_read_input_tokens=2200, cache_creation_input_tokens=500,
        ),
        "claude-sonnet-4-5": TokenUsage(
            input_tokens=7, output_tokens=40,
            cache_read_input_tokens=0, cache_creation_input_tokens=100,
        ),
    }


def test_malformed_line_matches_clean_file(malformed_session_path, tmp_path):
    """Dropping the broken line by hand gives the same stats."""
    lines = malformed_session_path.read_text(encoding="utf-8").splitlines()
    clean = tmp_path / "malformed_session.jsonl"
    clean.write_text("\n".join([lines[0], lines[2], lines[3]]) + "\n", encoding="utf-8")

    broken = scan_session_stats(malformed_session_path)
    assert broken == scan_session_stats(clean)
    assert broken.user_messages == 2
    assert broken.assistant_messages == 1
    assert broken.tool_calls == 1
    assert broken.usage_by_model == {
        "claude-haiku-4-5": TokenUsage(input_tokens=12, output_tokens=34),
    }


def test_usage_before_any_model_goes_to_unknown(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [
        user_event("2024-01-01T10:00:00Z"),
        assistant_event("2024-01-01T10:00:01Z", model="", usage=usage(3, 4)),
        assistant_event("2024-01-01T10:00:02Z", model="claude-opus-4-6", usage=usage(5, 6)),
    ])
    stats = scan_session_stats(path)

    assert stats.usage_by_model == {
        UNKNOWN_MODEL: TokenUsage(input_tokens=3, output_tokens=4),
        "claude-opus-4-6": TokenUsage(input_tokens=5, output_tokens=6),
    }


def test_usage_follows_most_recent_model(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [
        assistant_event("2024-01-01T10:00:00Z", model="claude-opus-4-6", usage=usage(1, 1)),
        assistant_event("2024-01-01T10:00:01Z", model="", usage=usage(2, 2)),
    ])
    stats = scan_session_stats(path)

    assert stats.usage_by_model == {
        "claude-opus-4-6": TokenUsage(input_tokens=3, output_tokens=3),
    }


def test_assistant_without_payload_still_counts(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [
        {"type": "assistant", "timestamp": "2024-01-01T10:00:00Z", "message": None},
    ])
    stats = scan_session_stats(path)
    assert stats.assistant_messages == 1
    assert stats.usage_by_model == {}


def test_filename_stem_is_default_id(tmp_path):
    path = write_jsonl(tmp_path / "abc-123.jsonl", [user_event("2024-01-01T10:00:00Z")])
    assert scan_session_stats(path).session_id == "abc-123"


def test_first_explicit_session_id_wins(tmp_path):
    path = write_jsonl(tmp_path / "file-name.jsonl", [
        user_event("2024-01-01T10:00:00Z"),
        user_event("2024-01-01T10:00:01Z", sessionId="first-id"),
        user_event("2024-01-01T10:00:02Z", sessionId="second-id"),
    ])
    assert scan_session_stats(path).session_id == "first-id"


def test_timestamps_kept_in_file_order(tmp_path):
    """First and last are positional; out-of-order lines are not re-sorted."""
    path = write_jsonl(tmp_path / "s.jsonl", [
        user_event("2024-01-01T12:00:00Z"),
        user_event("2024-01-01T09:00:00Z"),
        user_event("2024-01-01T11:00:00Z"),
    ])
    stats = scan_session_stats(path)
    assert stats.started_at.hour == 12
    assert stats.ended_at.hour == 11


def test_duration_keeps_milliseconds(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [
        user_event("2024-01-01T10:00:00.000Z"),
        assistant_event("2024-01-01T10:00:01.001Z"),
    ])
    assert scan_session_stats(path).duration_ms == 1001


def test_no_timestamps(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [user_event(None), assistant_event(None)])
    stats = scan_session_stats(path)
    assert stats.total_messages == 2
    assert stats.started_at is None
    assert stats.ended_at is None
    assert stats.duration_ms == 0


def test_empty_file(tmp_path):
    path = tmp_path / "empty.jsonl"
    path.write_bytes(b"")
    stats = scan_session_stats(path)
    assert stats.total_messages == 0


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        scan_session_stats(tmp_path / "nope.jsonl")
