"""Shared test fixtures for Claude Code Summary."""

import shutil
from pathlib import Path

import pytest

from claude_code_summary.config import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def simple_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "simple_session.jsonl"


@pytest.fixture
def tools_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "session_with_tools.jsonl"


@pytest.fixture
def malformed_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "malformed_session.jsonl"


@pytest.fixture
def claude_dir(tmp_path) -> Path:
    """A temporary ~/.claude with an empty projects directory."""
    base = tmp_path / ".claude"
    (base / "projects").mkdir(parents=True)
    return base


@pytest.fixture
def projects_root(claude_dir) -> Path:
    return claude_dir / "projects"


@pytest.fixture
def settings(claude_dir) -> Settings:
    return Settings.from_claude_dir(claude_dir)


@pytest.fixture
def project_dir(projects_root) -> Path:
    path = projects_root / "-home-wiz-projects-myapp"
    path.mkdir()
    return path


@pytest.fixture
def copy_fixture(project_dir):
    """Copy a fixture transcript into the project dir under a session id."""
    def _copy(source: Path, session_id: str) -> Path:
        dest = project_dir / f"{session_id}.jsonl"
        shutil.copyfile(source, dest)
        return dest
    return _copy
