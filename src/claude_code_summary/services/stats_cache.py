"""JSON file storage for the aggregate stats cache."""

import logging
import os
import tempfile
from pathlib import Path

import orjson

from claude_code_summary.errors import StatsCacheError
from claude_code_summary.types.stats import StatsCache

logger = logging.getLogger(__name__)


class StatsCacheStore:
    """Reads and atomically replaces ``stats-cache.json``."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> StatsCache:
        try:
            data = self._path.read_bytes()
        except OSError as e:
            raise StatsCacheError(f"reading {self._path}: {e}") from e

        try:
            raw = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            raise StatsCacheError(f"parsing {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise StatsCacheError(f"parsing {self._path}: expected a JSON object")
        try:
            return StatsCache.from_dict(raw)
        except (AttributeError, TypeError, ValueError) as e:
            raise StatsCacheError(f"parsing {self._path}: {e}") from e

    def save(self, cache: StatsCache):
        """Write the cache next to its target, then rename over it.

        On failure the previous file is left as it was.
        """
        payload = orjson.dumps(cache.to_dict(), option=orjson.OPT_INDENT_2)
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
        except OSError as e:
            raise StatsCacheError(f"writing {self._path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.write(b"\n")
            os.replace(tmp_name, self._path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name)
            raise StatsCacheError(f"writing {self._path}: {e}") from e
        logger.debug("Wrote stats cache %s (%d bytes)", self._path, len(payload))


def load_stats_cache(path: str | Path) -> StatsCache:
    return StatsCacheStore(path).load()


def save_stats_cache(cache: StatsCache, path: str | Path):
    StatsCacheStore(path).save(cache)
