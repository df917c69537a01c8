"""Filesystem storage for images attached to repair submissions."""

import logging
import re
from pathlib import Path

from utils.constants import UPLOADS_URL_PREFIX
from utils.ids import monotonic_millis

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_PATH_SEPARATOR_RE = re.compile(r"[/\\]")

# Upper bound on timestamp bumps when a generated name is already taken
MAX_NAME_ATTEMPTS = 1000


class AttachmentStoreError(Exception):
    """Raised when an attachment cannot be written."""


def sanitize_filename(original_name: str) -> str:
    """Reduce a client-supplied filename to a safe single path component.

    Directory parts are dropped and runs of whitespace become underscores.
    """
    # Browsers on Windows may send the full client path
    base = _PATH_SEPARATOR_RE.split(original_name)[-1]
    safe = _WHITESPACE_RE.sub("_", base)
    if safe in ("", ".", ".."):
        return "upload"
    return safe


class AttachmentStore:
    """Stores uploaded files under ``{timestamp}_{name}`` in one directory."""

    def __init__(self, upload_dir: str | Path):
        """Initialize the store.

        Args:
            upload_dir: Directory holding attachments, created on first save
        """
        self.upload_dir = Path(upload_dir)

    def save(self, original_name: str, content: bytes) -> str:
        """Write an attachment and return its ``/uploads/...`` reference.

        Args:
            original_name: Filename as sent by the client
            content: Raw file bytes

        Returns:
            Reference path of the stored file, e.g. ``/uploads/1700000000000_a.png``

        Raises:
            AttachmentStoreError: If the file could not be written
        """
        safe_name = sanitize_filename(original_name)
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            stored_name = self._write_exclusive(safe_name, content)
        except OSError as e:
            logger.error("Failed to store attachment %r: %s", original_name, e)
            raise AttachmentStoreError(f"Failed to store attachment: {e}") from e

        logger.info("Stored attachment %s (%d bytes)", stored_name, len(content))
        return f"{UPLOADS_URL_PREFIX}/{stored_name}"

    def path_for(self, stored_name: str) -> Path:
        """Return the filesystem path of a stored attachment."""
        return self.upload_dir / stored_name

    def _write_exclusive(self, safe_name: str, content: bytes) -> str:
        """Create the file under a fresh name, never overwriting an existing one."""
        timestamp = monotonic_millis()
        for _ in range(MAX_NAME_ATTEMPTS):
            stored_name = f"{timestamp}_{safe_name}"
            path = self.upload_dir / stored_name
            try:
                f = open(path, "xb")
            except FileExistsError:
                timestamp += 1
                continue
            try:
                with f:
                    f.write(content)
            except OSError:
                path.unlink(missing_ok=True)
                raise
            return stored_name
        raise OSError(f"No free attachment name for {safe_name}")
