"""Append-only JSON file holding every accepted repair submission."""

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Raised when a record cannot be persisted."""


class RecordStoreReadError(Exception):
    """Raised when the store file exists but cannot be read as a JSON array."""


class RecordStore:
    """Flat JSON array of submission records, oldest first.

    Appends rewrite the whole file. They are serialized by a lock and land
    through an atomic replace, so readers never see a half-written file and
    concurrent requests in one process cannot drop each other's records.
    """

    def __init__(self, path: str | Path):
        """Initialize the store.

        Args:
            path: Location of the JSON file; its directory is created on append
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def read_all(self) -> list[dict]:
        """Return all stored records in append order.

        Returns:
            List of record dicts, empty if nothing has been stored yet

        Raises:
            RecordStoreReadError: If the file exists but is not a JSON array
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to read submissions from %s: %s", self.path, e)
            raise RecordStoreReadError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, list):
            logger.error("Submissions file %s does not hold a JSON array", self.path)
            raise RecordStoreReadError(f"{self.path} does not hold a JSON array")
        return data

    def append(self, record: dict) -> None:
        """Add one record to the end of the store.

        A missing or unreadable file counts as an empty store. An unreadable
        file is moved aside rather than overwritten.

        Raises:
            RecordStoreError: If the file could not be written
        """
        with self._lock:
            try:
                records = self.read_all()
            except RecordStoreReadError:
                self._quarantine_corrupt_file()
                records = []

            records.append(record)
            try:
                self._write(records)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to write submissions to %s: %s", self.path, e)
                raise RecordStoreError(f"Failed to save submission: {e}") from e

    def _write(self, records: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _quarantine_corrupt_file(self) -> None:
        """Rename an unreadable store file so its contents survive the rewrite."""
        millis = int(time.time() * 1000)
        backup = self.path.with_name(f"{self.path.name}.corrupt-{millis}")
        try:
            self.path.replace(backup)
            logger.warning("Moved unreadable submissions file to %s", backup)
        except OSError as e:
            logger.warning("Could not move unreadable file %s aside: %s", self.path, e)
