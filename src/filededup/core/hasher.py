"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Content fingerprinting with a size-dependent strategy and a pluggable hash algorithm.

- Files below the large-file threshold are hashed in full, streamed in
  fixed-size reads.
- Files at or above the threshold are hashed from their first and last
  `sample_bytes` plus their exact size.

Sampled hashing is a deliberate accuracy/speed trade-off, not cryptographic
duplicate detection: two different large files with the same size and the same
head and tail samples get the same fingerprint and are reported as duplicates.
The default algorithm (xxh3-64) is fast and non-cryptographic; it avoids
incidental collisions but offers no protection against crafted ones.
"""

import logging
import os
import stat
import struct
import xxhash

from filededup.core.errors import HashError
from filededup.core.interfaces import ContentHasher, HashAlgorithm, IncrementalHash
from filededup.core.models import (
    DEFAULT_LARGE_FILE_THRESHOLD, DEFAULT_SAMPLE_SIZE, FileRecord, Fingerprint, KIB)

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 16 * KIB
# O_NONBLOCK keeps open() from waiting on a FIFO writer; no effect on regular files
OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0) | getattr(os, "O_BINARY", 0)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def new(self) -> IncrementalHash:
        return xxhash.xxh3_64()


class HasherImpl(ContentHasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Stateless apart from its configuration, so one instance is shared by all workers.
    """

    def __init__(
        self,
        algorithm: HashAlgorithm = None,
        large_file_threshold: int = DEFAULT_LARGE_FILE_THRESHOLD,
        sample_bytes: int = DEFAULT_SAMPLE_SIZE,
        chunk_size: int = READ_CHUNK_SIZE,
    ):
        if sample_bytes <= 0 or large_file_threshold < sample_bytes:
            raise ValueError("large_file_threshold must be at least sample_bytes, and sample_bytes positive")
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.large_file_threshold = large_file_threshold
        self.sample_bytes = sample_bytes
        self.chunk_size = chunk_size

    def is_sampled(self, size: int) -> bool:
        return size >= self.large_file_threshold

    def compute_fingerprint(self, record: FileRecord) -> Fingerprint:
        """
        Hash one file. Raises HashError if the file vanished, cannot be read,
        or no longer has the size recorded at traversal time.
        """
        sampled = self.is_sampled(record.size)
        try:
            with self._open_regular(record.path) as f:
                current_size = os.fstat(f.fileno()).st_size
                if current_size != record.size:
                    raise HashError(record.path, f"File size changed during scan ({record.size} -> {current_size})")
                if sampled:
                    digest = self._sampled_digest(f, record)
                else:
                    digest = self._full_digest(f, record)
        except HashError:
            raise
        except OSError as e:
            raise HashError(record.path, f"Could not read file ({e.strerror or e})", e) from e

        return Fingerprint(digest=digest, size=record.size, sampled=sampled)

    @staticmethod
    def _open_regular(path: str):
        """
        Open for binary reading without blocking, so a FIFO or device that
        replaced the file after traversal is rejected instead of hanging a worker.
        """
        fd = os.open(path, OPEN_FLAGS)
        try:
            if not stat.S_ISREG(os.fstat(fd).st_mode):
                raise HashError(path, "No longer a regular file")
            return os.fdopen(fd, "rb")
        except BaseException:
            os.close(fd)
            raise

    def _full_digest(self, f, record: FileRecord) -> bytes:
        """Streams the entire file through the hash, one chunk at a time."""
        hasher = self.algorithm.new()
        total = 0
        while True:
            chunk = f.read(self.chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
            total += len(chunk)

        if total != record.size:
            raise HashError(record.path, f"Short read ({total} of {record.size} bytes)")
        return hasher.digest()

    def _sampled_digest(self, f, record: FileRecord) -> bytes:
        """Hashes head sample, tail sample and the exact size (little-endian u64)."""
        hasher = self.algorithm.new()

        head = f.read(self.sample_bytes)
        if len(head) != self.sample_bytes:
            raise HashError(record.path, "Short read of head sample")
        hasher.update(head)

        f.seek(record.size - self.sample_bytes)
        tail = f.read(self.sample_bytes)
        if len(tail) != self.sample_bytes:
            raise HashError(record.path, "Short read of tail sample")
        hasher.update(tail)

        hasher.update(struct.pack('<Q', record.size))
        return hasher.digest()
