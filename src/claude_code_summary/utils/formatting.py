"""Human-readable numbers, durations and model names."""

from datetime import datetime, timezone


def format_number(n: int) -> str:
    """Add thousand separators: 1234567 -> "1,234,567"."""
    return f"{n:,}"


def format_tokens(n: int) -> str:
    """Format a token count with a K/M/B suffix."""
    if n >= 1_000_000_000:
        return f"{n / 1_000_000_000:.1f}B"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_duration(ms: int) -> str:
    """Format milliseconds as "2h 5m", "12m" or "40s"."""
    seconds = int(ms // 1000)
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return f"{seconds}s"


def relative_time(dt: datetime | None, now: datetime | None = None) -> str:
    """Describe a moment relative to now: "just now", "2h ago", "3d ago"."""
    if dt is None:
        return "unknown"
    if now is None:
        now = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    if now.tzinfo is None:
        now = now.astimezone()

    seconds = (now - dt).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 30 * 86400:
        return f"{int(seconds // 86400)}d ago"
    return dt.astimezone(now.tzinfo).strftime("%Y-%m-%d")


# Checked in order; the first substring hit wins.
_MODEL_NAMES = [
    ("opus-4-6", "Opus 4.6"),
    ("opus-4-5", "Opus 4.5"),
    ("sonnet-4-6", "Sonnet 4.6"),
    ("sonnet-4-5", "Sonnet 4.5"),
    ("haiku-4-5", "Haiku 4.5"),
    ("opus", "Opus"),
    ("sonnet", "Sonnet"),
    ("haiku", "Haiku"),
]


def model_short(model: str) -> str:
    """Short display name for a model id."""
    for needle, name in _MODEL_NAMES:
        if needle in model:
            return name
    return model


def truncate(s: str, max_len: int) -> str:
    """Cut a string to max_len characters, ending in "..." when shortened."""
    s = " ".join(s.split())
    if len(s) <= max_len:
        return s
    if max_len <= 3:
        return s[:max_len]
    return s[:max_len - 3] + "..."


def short_id(session_id: str) -> str:
    return session_id[:8]
