"""Durable key-value storage for client-side progress.

The client keeps three independent JSON blobs: the user stats snapshot, the
bounded job history and the cached access credential. Reads never fail:
missing or unreadable blobs fall back to their documented defaults.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ugc_engine.domain.models import Job, UserStats
from ugc_engine.logging import get_logger

logger = get_logger(__name__)

STATS_KEY = "ugc-user-stats"
HISTORY_KEY = "ugc-job-history"
CREDENTIAL_KEY = "ugc-password"

DEFAULT_HISTORY_LIMIT = 20

_job_adapter = TypeAdapter(Job)


class KeyValueStore(ABC):
    """String key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; removing an absent key is not an error."""
        ...


class InMemoryStore(KeyValueStore):
    """Store backed by a dict, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore(KeyValueStore):
    """Store keeping one file per key under a base directory."""

    def __init__(self, base_path: Path, create_dirs: bool = True) -> None:
        self.base_path = Path(base_path).expanduser()
        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_path / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("store_read_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        # Write-then-rename so a crash never leaves a half-written blob
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class ProgressRepository:
    """Typed access to the stats, history and credential blobs."""

    def __init__(self, store: KeyValueStore, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.store = store
        self.history_limit = history_limit

    def load_stats(self) -> UserStats:
        raw = self.store.get(STATS_KEY)
        if not raw:
            return UserStats()
        try:
            return UserStats.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("stats_blob_invalid", errors=e.error_count())
            return UserStats()

    def save_stats(self, stats: UserStats) -> None:
        self.store.set(STATS_KEY, stats.model_dump_json(by_alias=True))

    def load_history(self) -> list[Job]:
        """Load history, most recent first, skipping entries that fail to parse."""
        raw = self.store.get(HISTORY_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError:
            logger.warning("history_blob_invalid")
            return []
        if not isinstance(entries, list):
            logger.warning("history_blob_invalid")
            return []

        jobs: list[Job] = []
        for entry in entries:
            try:
                jobs.append(_job_adapter.validate_python(entry))
            except ValidationError:
                logger.warning("history_entry_skipped", entry_id=_entry_id(entry))
        return jobs[: self.history_limit]

    def save_history(self, jobs: list[Job]) -> list[Job]:
        """Persist the most recent jobs and return what was kept."""
        kept = jobs[: self.history_limit]
        payload = [job.model_dump(mode="json", by_alias=True) for job in kept]
        self.store.set(HISTORY_KEY, json.dumps(payload))
        return kept

    def add_to_history(self, job: Job) -> list[Job]:
        return self.save_history([job, *self.load_history()])

    def load_credential(self) -> str | None:
        return self.store.get(CREDENTIAL_KEY) or None

    def save_credential(self, credential: str) -> None:
        self.store.set(CREDENTIAL_KEY, credential)

    def clear_credential(self) -> None:
        self.store.delete(CREDENTIAL_KEY)

    def reset(self) -> None:
        """Wipe stats and history. The credential is kept."""
        self.store.delete(STATS_KEY)
        self.store.delete(HISTORY_KEY)
        logger.info("progress_reset")


def _entry_id(entry: object) -> str | None:
    if isinstance(entry, dict):
        value = entry.get("id")
        return str(value) if value is not None else None
    return None
