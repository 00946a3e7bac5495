"""Exceptions raised by the reporting core."""


class ReportError(Exception):
    """Base class for errors that abort a command."""


class StatsCacheError(ReportError):
    """The stats cache file is missing, unreadable or malformed."""


class ProjectsRootError(ReportError):
    """The projects root directory cannot be listed."""


class SessionNotFoundError(ReportError):
    """No session id or transcript filename matches a prefix."""

    def __init__(self, prefix: str):
        super().__init__(f"no session matching {prefix!r}")
        self.prefix = prefix


class TranscriptReadError(ReportError):
    """A transcript cannot be read past a given line."""


class UsageError(ReportError):
    """Bad command-line arguments."""
