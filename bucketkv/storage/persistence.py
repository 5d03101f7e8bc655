"""
Disk Persistence Module

Saves the whole table to a flat text file and loads it back.

File format: one ``key:value`` line per entry (see codec.py for escaping),
lines joined by newlines. The file is truncated and rewritten on every
save. Persistence is best effort: I/O errors are logged and never raised
to the caller.
"""

import logging
import os
from typing import Iterable, List

from . import codec
from .buckets import Entry
from ..config.settings import settings

logger = logging.getLogger(__name__)


class DiskPersistence:
    """
    Reads and writes store snapshots to a text file.

    Attributes:
        file_path: Location of the data file
    """

    def __init__(self, file_path: str = None):
        """
        Args:
            file_path: Path of the data file (default from settings.DATA_FILE)
        """
        self.file_path = file_path if file_path is not None else settings.DATA_FILE

    def save(self, entries: Iterable[Entry]) -> bool:
        """
        Write a full snapshot of the store.

        The parent directory is created if it does not exist. On failure
        the error is logged and the on-disk file may be stale or truncated.

        Args:
            entries: Every entry currently in the store

        Returns:
            True if the snapshot was written, False otherwise
        """
        content = codec.LINE_BREAK.join(
            codec.encode_line(entry.key, entry.value) for entry in entries
        )

        try:
            # Encode before truncating the existing file
            data = content.encode("utf-8")
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.file_path, "wb") as f:
                f.write(data)
        except (OSError, UnicodeError) as exc:
            logger.error(f"Error saving to disk ({self.file_path}): {exc}", exc_info=True)
            return False

        return True

    def load(self) -> List[Entry]:
        """
        Read all entries from the data file.

        Blank and malformed lines are skipped. A missing file yields an
        empty list; an unreadable one is logged and also yields an empty list.

        Returns:
            Entries in file order
        """
        if not os.path.exists(self.file_path):
            return []

        try:
            with open(self.file_path, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Error loading from disk ({self.file_path}): {exc}")
            return []

        entries = []
        skipped = 0
        for line in content.split(codec.LINE_BREAK):
            if not line.strip():
                continue
            decoded = codec.decode_line(line)
            if decoded is None:
                skipped += 1
                continue
            entries.append(Entry(*decoded))

        if skipped:
            logger.debug(f"Skipped {skipped} malformed line(s) in {self.file_path}")
        return entries
