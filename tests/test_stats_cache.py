"""Tests for stats cache persistence."""

import os

import orjson
import pytest

from claude_code_summary.errors import StatsCacheError
from claude_code_summary.services import stats_cache
from claude_code_summary.services.stats_cache import (
    StatsCacheStore,
    load_stats_cache,
    save_stats_cache,
)
from claude_code_summary.types.stats import (
    DailyActivity,
    DailyModelTokens,
    LongestSession,
    ModelUsage,
    StatsCache,
)


@pytest.fixture
def sample_cache() -> StatsCache:
    return StatsCache(
        last_computed_date="2024-03-15",
        daily_activity=[
            DailyActivity(date="2024-03-14", message_count=10, session_count=2, tool_call_count=4),
            DailyActivity(date="2024-03-15", message_count=3, session_count=1),
        ],
        daily_model_tokens=[
            DailyModelTokens(date="2024-03-14", tokens_by_model={"claude-opus-4-6": 1200}),
        ],
        model_usage={
            "claude-opus-4-6": ModelUsage(
                input_tokens=10, output_tokens=1200,
                cache_read_input_tokens=5000, cache_creation_input_tokens=700,
            ),
        },
        total_sessions=3,
        total_messages=13,
        longest_session=LongestSession(
            session_id="abc", duration=600000, message_count=10,
            timestamp="2024-03-14T09:00:00Z",
        ),
        first_session_date="2024-03-14T00:00:00Z",
        hour_counts={"9": 2, "17": 1},
    )


def test_round_trip(tmp_path, sample_cache):
    path = tmp_path / "stats-cache.json"
    save_stats_cache(sample_cache, path)
    assert load_stats_cache(path) == sample_cache


def test_camel_case_keys(tmp_path, sample_cache):
    path = tmp_path / "stats-cache.json"
    StatsCacheStore(path).save(sample_cache)
    raw = orjson.loads(path.read_bytes())

    assert set(raw) == {
        "version", "lastComputedDate", "dailyActivity", "dailyModelTokens",
        "modelUsage", "totalSessions", "totalMessages", "longestSession",
        "firstSessionDate", "hourCounts",
    }
    assert raw["dailyActivity"][0] == {
        "date": "2024-03-14", "messageCount": 10, "sessionCount": 2, "toolCallCount": 4,
    }
    assert raw["modelUsage"]["claude-opus-4-6"]["cacheReadInputTokens"] == 5000
    assert raw["longestSession"]["sessionId"] == "abc"
    assert path.read_bytes().endswith(b"\n")


def test_save_creates_parent_dirs(tmp_path, sample_cache):
    store = StatsCacheStore(tmp_path / "a" / "b" / "stats-cache.json")
    assert not store.exists()
    store.save(sample_cache)
    assert store.exists()


def test_save_leaves_no_temp_files(tmp_path, sample_cache):
    StatsCacheStore(tmp_path / "stats-cache.json").save(sample_cache)
    assert [p.name for p in tmp_path.iterdir()] == ["stats-cache.json"]


def test_failed_save_keeps_previous_file(tmp_path, sample_cache, monkeypatch):
    path = tmp_path / "stats-cache.json"
    store = StatsCacheStore(path)
    store.save(sample_cache)
    before = path.read_bytes()

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(stats_cache.os, "replace", fail_replace)
    changed = StatsCache(total_sessions=99)
    with pytest.raises(StatsCacheError, match="disk full"):
        store.save(changed)

    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["stats-cache.json"]


def test_load_missing(tmp_path):
    with pytest.raises(StatsCacheError):
        StatsCacheStore(tmp_path / "nope.json").load()


@pytest.mark.parametrize("content", [
    b"",
    b"{not json",
    b"[1, 2]",
    b'{"dailyActivity": 5}',
    b'{"modelUsage": [1]}',
    b'{"dailyActivity": [1]}',
])
def test_load_malformed(tmp_path, content):
    path = tmp_path / "stats-cache.json"
    path.write_bytes(content)
    with pytest.raises(StatsCacheError):
        load_stats_cache(path)


def test_load_tolerates_missing_fields(tmp_path):
    path = tmp_path / "stats-cache.json"
    path.write_bytes(b'{"version": 1, "totalSessions": 4}')
    cache = load_stats_cache(path)
    assert cache.total_sessions == 4
    assert cache.daily_activity == []
    assert cache.longest_session == LongestSession()


def test_find_day(sample_cache):
    assert sample_cache.find_day("2024-03-15").message_count == 3
    assert sample_cache.find_day("2024-01-01") is None


def test_load_accepts_os_path(tmp_path, sample_cache):
    path = os.path.join(tmp_path, "stats-cache.json")
    save_stats_cache(sample_cache, path)
    assert load_stats_cache(path).total_messages == 13
