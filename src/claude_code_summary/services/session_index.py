"""Session and project listings from per-project ``sessions-index.json`` files."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import orjson

from claude_code_summary.errors import ProjectsRootError, SessionNotFoundError
from claude_code_summary.services.jsonl_parser import parse_timestamp
from claude_code_summary.types.sessions import (
    Project,
    SessionEntry,
    SessionIndex,
    SessionLookup,
)

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "sessions-index.json"


def load_session_index(path: str | Path) -> Optional[SessionIndex]:
    """Read an index file, or return None when it is absent or malformed."""
    path = Path(path)
    try:
        raw = orjson.loads(path.read_bytes())
    except FileNotFoundError:
        return None
    except (OSError, orjson.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable index %s: %s", path, e)
        return None

    if not isinstance(raw, dict):
        return None
    try:
        return SessionIndex.from_dict(raw)
    except ValueError as e:
        logger.debug("Ignoring malformed index %s: %s", path, e)
        return None


def cutoff_string(cutoff: datetime) -> str:
    """Render a cutoff as the fixed-width UTC string index timestamps use."""
    if cutoff.tzinfo is None:
        cutoff = cutoff.astimezone()
    return cutoff.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


class SessionIndexResolver:
    """Answers session and project queries without parsing transcripts."""

    def __init__(self, projects_root: str | Path):
        self._projects_root = Path(projects_root)

    @property
    def projects_root(self) -> Path:
        return self._projects_root

    def _project_dirs(self) -> list[Path]:
        try:
            entries = sorted(self._projects_root.iterdir())
        except OSError as e:
            raise ProjectsRootError(f"reading projects dir {self._projects_root}: {e}") from e
        return [e for e in entries if e.is_dir()]

    def list_projects(self) -> list[Project]:
        """Summarize every project directory that has at least one session.

        Without an index, each ``*.jsonl`` file counts as one session and the
        newest file mtime stands in for the last activity.
        """
        projects = []
        for project_dir in self._project_dirs():
            project = Project(dir_name=project_dir.name, path=project_dir.name)

            index = load_session_index(project_dir / INDEX_FILE_NAME)
            if index is not None:
                project.has_index = True
                project.path = index.original_path or project_dir.name
                project.session_count = len(index.entries)
                for entry in index.entries:
                    project.message_count += entry.message_count
                    modified = parse_timestamp(entry.modified)
                    if modified is not None and (
                        project.last_active is None or modified > project.last_active
                    ):
                        project.last_active = modified
            else:
                # Dash-encoded names are ambiguous, so the dir name is kept as is.
                session_files = list(project_dir.glob("*.jsonl"))
                project.session_count = len(session_files)
                for session_file in session_files:
                    try:
                        mtime = session_file.stat().st_mtime
                    except OSError:
                        continue
                    modified = datetime.fromtimestamp(mtime, tz=timezone.utc)
                    if project.last_active is None or modified > project.last_active:
                        project.last_active = modified

            if project.session_count == 0:
                continue
            projects.append(project)
        return projects

    def list_sessions(self, project_filter: str = "") -> list[SessionEntry]:
        """All indexed sessions, newest ``created`` first.

        ``project_filter`` is a case-insensitive substring of the project
        directory name or of the index's original path.
        """
        needle = project_filter.lower()
        sessions: list[SessionEntry] = []
        for project_dir in self._project_dirs():
            index = load_session_index(project_dir / INDEX_FILE_NAME)
            if index is None:
                continue
            if needle and needle not in project_dir.name.lower() \
                    and needle not in index.original_path.lower():
                continue
            sessions.extend(index.entries)

        # ISO 8601 strings are fixed width, so string order is time order.
        sessions.sort(key=lambda s: s.created, reverse=True)
        return sessions

    def list_sessions_after(self, cutoff: datetime) -> list[SessionEntry]:
        after = cutoff_string(cutoff)
        return [s for s in self.list_sessions() if s.created >= after]

    def find_session(self, id_prefix: str) -> SessionLookup:
        """Resolve a case-insensitive session id prefix to a transcript path.

        Index entries are searched first across all projects; transcript
        filenames are the fallback and carry no metadata. Raises
        SessionNotFoundError when nothing matches.
        """
        prefix = id_prefix.lower()
        project_dirs = self._project_dirs()

        for project_dir in project_dirs:
            index = load_session_index(project_dir / INDEX_FILE_NAME)
            if index is None:
                continue
            for entry in index.entries:
                if entry.session_id.lower().startswith(prefix):
                    path = entry.full_path or str(project_dir / f"{entry.session_id}.jsonl")
                    return SessionLookup(path=path, entry=entry)

        for project_dir in project_dirs:
            for session_file in sorted(project_dir.glob("*.jsonl")):
                if session_file.stem.lower().startswith(prefix):
                    return SessionLookup(path=str(session_file))

        raise SessionNotFoundError(id_prefix)
