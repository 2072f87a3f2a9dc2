"""
Process-wide registry of temporary HTML files.

Each conversion writes its composed document to a temp file that the
browser loads from disk. Files are released right after the render and
any leftovers are removed when the registry is drained at shutdown.
"""

import atexit
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Set

from .errors import FilesystemError

logger = logging.getLogger(__name__)


class TempFileRegistry:
    """Tracks temp files created for renders so they can be cleaned up."""

    def __init__(self, prefix: str = "m2p_"):
        self.prefix = prefix
        self._paths: Set[Path] = set()
        self._lock = threading.Lock()
        self._initialized = False

    def init(self) -> None:
        """Register the exit-time drain. Safe to call more than once."""
        with self._lock:
            if self._initialized:
                return
            atexit.register(self.drain)
            self._initialized = True
        logger.debug("Temp file registry initialized")

    def create_html_file(self, content: str) -> Path:
        """
        Write content to a new temp .html file and track it.

        Raises:
            FilesystemError: the temp file cannot be written
        """
        try:
            fd, name = tempfile.mkstemp(suffix=".html", prefix=self.prefix)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise FilesystemError(f"Cannot write temporary HTML file: {e}") from e

        path = Path(name)
        with self._lock:
            self._paths.add(path)
        return path

    def release(self, path: Path) -> None:
        """Delete a tracked temp file. Missing files are ignored."""
        path = Path(path)
        with self._lock:
            self._paths.discard(path)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temp file {path}: {e}")

    def drain(self) -> int:
        """Delete every tracked temp file. Returns how many were tracked."""
        with self._lock:
            paths = list(self._paths)
        for path in paths:
            self.release(path)
        if paths:
            logger.info(f"Removed {len(paths)} leftover temp file(s)")
        return len(paths)

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._paths)


# Global registry instance, initialized by the entry point
temp_files = TempFileRegistry()
