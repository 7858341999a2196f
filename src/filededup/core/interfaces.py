"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scan pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so
that stages can be swapped or faked in tests without inheritance.

Key Components:
---------------
- HashAlgorithm: Factory for incremental, fixed-width hash objects (e.g., xxh3-64).
- ContentHasher: Computes the Fingerprint of one FileRecord.
- PathCollector: Walks a directory tree and yields FileRecords.
- ProgressObserver: Receives (completed, total) hashing progress.
- WarningSink: Receives non-fatal ScanWarnings as they occur.
"""

from typing import Protocol, Iterator
from filededup.core.models import FileRecord, Fingerprint, ScanWarning


class IncrementalHash(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Allows plugging in a different fast hash without touching the
    full/sampled hashing strategy.
    """

    def new(self) -> IncrementalHash:
        """Returns a fresh incremental hash object."""
        ...


class ContentHasher(Protocol):
    """Interface for computing a content fingerprint of a file."""

    def compute_fingerprint(self, record: FileRecord) -> Fingerprint:
        """
        Raises:
            HashError: if the file cannot be read to completion.
        """
        ...


class PathCollector(Protocol):
    """Interface for scanning a directory tree lazily."""

    def collect(self) -> Iterator[FileRecord]:
        ...


class ProgressObserver(Protocol):
    def __call__(self, completed: int, total: int) -> None: ...


class WarningSink(Protocol):
    def __call__(self, warning: ScanWarning) -> None: ...
