"""
JSON Directory Storage Implementation

DESIGN DECISION: Each key is one `<key>.json` file in a data directory.
1. Users can open and back up their data with any text editor
2. No database setup required
3. A whole-document rewrite per change matches how the data is used

TRADEOFFS:
- No cross-key transactions (each document is independent)
- Last write wins if two processes share a directory

Writes go to a temporary file first and are moved into place with
os.replace, so a crash never leaves a half-written document behind.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from invoicebook.services.storage.interface import KeyValueStore, StorageWriteError

logger = structlog.get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonDirectoryStore(KeyValueStore):
    """
    File-backed key-value store.

    Transient OS errors on write are retried with exponential backoff.
    """

    def __init__(self, data_dir: str | Path, write_attempts: int = 3):
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._write_attempts = write_attempts

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable counts as absent; the document layer falls back to defaults
            logger.warning("storage_read_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    self._atomic_write(path, value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {key}: {e}") from e

    def _atomic_write(self, path: Path, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {key}: {e}") from e

    def keys(self) -> list[str]:
        return sorted(
            p.stem for p in self._dir.glob("*.json") if not p.name.startswith(".tmp-")
        )
