"""File-backed key-value storage."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from nutritrack.services.meals import KeyValueStorage


@dataclass
class FileStorage(KeyValueStorage):
    """Stores each key as a UTF-8 JSON file inside a directory."""

    directory: Path

    def load(self, key: str) -> str | None:
        """Return the file contents for a key, if the file exists."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, value: str) -> None:
        """Atomically replace the file for a key."""
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"
