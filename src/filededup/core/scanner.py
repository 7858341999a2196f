"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Path collector: lazy recursive traversal producing FileRecords.
Features:
- os.walk in OS-reported order, never following symbolic links
- Skips directories, special files (sockets, devices, FIFOs) and zero-byte files
- Applies the inclusive minimum-size filter
- Unreadable directories, broken links and failed stat calls become warnings
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from filededup.core.errors import ConfigurationError
from filededup.core.interfaces import PathCollector, WarningSink
from filededup.core.models import DEFAULT_MIN_SIZE, FileRecord, ScanWarning, WarningKind

logger = logging.getLogger(__name__)


class FileScannerImpl(PathCollector):
    """
    Walks a directory tree and yields FileRecords for regular files of at
    least `min_size` bytes.

    Attributes:
        root_dir: Absolute root directory to scan
        min_size: Minimum file size in bytes (inclusive)
        on_warning: Receives a ScanWarning for every skipped, unreadable entry
    """

    def __init__(
        self,
        root_dir: str,
        min_size: int = DEFAULT_MIN_SIZE,
        on_warning: Optional[WarningSink] = None,
    ):
        self.root_dir = self.validate_root(root_dir)
        self.min_size = min_size
        self.on_warning = on_warning
        self.processed_entries = 0

    @staticmethod
    def validate_root(root_dir: str) -> str:
        """
        Resolve the root directory and make sure it can be scanned.
        Raises ConfigurationError before any traversal happens.
        """
        root_path = Path(root_dir).expanduser()
        if not root_path.exists():
            error_msg = f"Directory does not exist: {root_dir}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {root_dir}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)
        return str(root_path.resolve())

    def collect(self) -> Iterator[FileRecord]:
        """
        Lazily yield accepted files. Records carry a discovery sequence number
        that later stages use for a stable report order.
        """
        logger.debug(f"Scanning directory: {self.root_dir} (min_size={self.min_size})")
        sequence = 0

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error, followlinks=False):
            for dirname in dirs:
                if os.path.islink(os.path.join(root, dirname)):
                    logger.debug(f"Not following directory link: {os.path.join(root, dirname)}")

            for filename in files:
                self.processed_entries += 1
                record = self._process_file(os.path.join(root, filename), sequence)
                if record is not None:
                    sequence += 1
                    yield record

        logger.debug(f"Scan completed. Accepted {sequence} of {self.processed_entries} entries.")

    def _process_file(self, path: str, sequence: int) -> Optional[FileRecord]:
        """
        Return a FileRecord if the path is a regular file that passes the filters.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            self._warn(path, f"Could not stat entry: {e.strerror or e}")
            return None

        if stat.S_ISLNK(st.st_mode):
            if not os.path.exists(path):
                self._warn(path, "Broken symbolic link")
            else:
                logger.debug(f"Skipping symbolic link: {path}")
            return None

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping special file: {path}")
            return None

        if st.st_size == 0:
            logger.debug(f"Skipping zero-byte file: {path}")
            return None

        if st.st_size < self.min_size:
            logger.debug(f"Skipping {path} (size {st.st_size} below {self.min_size} bytes)")
            return None

        return FileRecord(path=path, size=st.st_size, mtime=st.st_mtime, sequence=sequence)

    def _on_walk_error(self, error: OSError) -> None:
        self._warn(error.filename or self.root_dir, f"Could not read directory: {error.strerror or error}")

    def _warn(self, path: str, message: str) -> None:
        logger.warning(f"{message}: {path}")
        if self.on_warning:
            self.on_warning(ScanWarning(path=str(path), kind=WarningKind.TRAVERSAL, message=message))
