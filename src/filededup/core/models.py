"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models of the scan pipeline: records, fingerprints, groups, warnings and stats.
Records are immutable; each stage hands new records to the next one.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Union

from filededup.core.errors import ConfigurationError

KIB = 1024
MIB = 1024 * KIB

DEFAULT_MIN_SIZE = 1 * KIB
DEFAULT_LARGE_FILE_THRESHOLD = 1 * MIB
DEFAULT_SAMPLE_SIZE = 64 * KIB


# =============================
# Enums
# =============================

class Stage(str, Enum):
    COLLECT = "collect"
    FILTER = "filter"
    HASH = "hash"
    GROUP = "group"

    @property
    def display_name(self) -> str:
        """Human-readable name for progress output."""
        mapping = {
            Stage.COLLECT: "Collecting files",
            Stage.FILTER: "Size pre-grouping",
            Stage.HASH: "Content hashing",
            Stage.GROUP: "Duplicate grouping",
        }
        return mapping.get(self, self.value)

    @classmethod
    def get_all(cls):
        return [cls.COLLECT, cls.FILTER, cls.HASH, cls.GROUP]


class WarningKind(str, Enum):
    TRAVERSAL = "traversal"
    HASH = "hash"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Fingerprint:
    """
    Fixed-width content digest plus the byte size it was computed over.
    Two fingerprints are equal only when both the digest and the size match,
    which rejects same-digest/different-size collisions of sampled hashing.
    """
    digest: bytes
    size: int
    sampled: bool = field(default=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Fingerprint digest must be bytes")
        if self.size < 0:
            raise ValueError("Fingerprint size cannot be negative")

    @property
    def hex(self) -> str:
        return self.digest.hex()

    def __repr__(self):
        return f"<Fingerprint {self.hex} size={self.size}{' sampled' if self.sampled else ''}>"


class PreGroupKey(NamedTuple):
    """Cheap bucketing key. mtime_bucket is None unless an mtime window is configured."""
    size: int
    mtime_bucket: Optional[int] = None


@dataclass(frozen=True)
class FileRecord:
    """
    A regular file found during traversal.
    size and mtime are captured once; the fingerprint is attached exactly once
    by the hasher through with_fingerprint(), which returns a new record.
    """
    path: str
    size: int  # in bytes
    mtime: float
    sequence: int = 0  # discovery order within one scan
    fingerprint: Optional[Fingerprint] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def with_fingerprint(self, fingerprint: Fingerprint) -> 'FileRecord':
        if self.fingerprint is not None:
            raise ValueError(f"Fingerprint already assigned for {self.path}")
        return replace(self, fingerprint=fingerprint)

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Two or more files sharing one fingerprint (and therefore one size).
    Member order is significant: it is the stable report order.
    """
    fingerprint: Fingerprint
    files: List[FileRecord]

    def __post_init__(self):
        if len(self.files) < 2:
            raise ValueError("A duplicate group needs at least two files")
        for file in self.files:
            if file.size != self.fingerprint.size:
                raise ValueError(f"Cannot add file with different size to a group: {file.path}")

    @property
    def size(self) -> int:
        return self.fingerprint.size

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def wasted_bytes(self) -> int:
        """Bytes that would be reclaimed by keeping a single copy."""
        return self.size * (len(self.files) - 1)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class ScanWarning:
    """A non-fatal, per-path problem recorded during a scan."""
    path: str
    kind: WarningKind
    message: str

    def __str__(self):
        return f"[{self.kind.value}] {self.path}: {self.message}"


class ScanStats:
    """
    Statistics collected during a scan.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def print_summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            try:
                label = Stage(stage).display_name
            except ValueError:
                label = stage.title()
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class ScanResult:
    """Terminal artifact of a scan: duplicate groups plus the warnings side channel."""
    groups: List[DuplicateGroup] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)

    def __iter__(self) -> Iterator[DuplicateGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)


"""
DTO for scan parameters with built-in validation.
Interface-agnostic: used by the command layer and the CLI.
"""
from filededup.utils.convert_utils import ConvertUtils


@dataclass
class ScanParams:
    """Parameters for a scan operation with validation."""
    root_dir: str
    min_size_bytes: int = DEFAULT_MIN_SIZE
    large_file_threshold_bytes: int = DEFAULT_LARGE_FILE_THRESHOLD
    sample_bytes: int = DEFAULT_SAMPLE_SIZE
    thread_count: Optional[int] = None  # None or 0 selects the default pool size
    mtime_window: Optional[int] = None  # seconds; None disables mtime bucketing

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ConfigurationError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ConfigurationError("Minimum size cannot be negative")

        if self.sample_bytes <= 0:
            raise ConfigurationError("Sample size must be positive")

        if self.large_file_threshold_bytes < self.sample_bytes:
            raise ConfigurationError("Large-file threshold cannot be smaller than the sample size")

        if self.thread_count is not None and self.thread_count < 0:
            raise ConfigurationError("Thread count cannot be negative")

        if self.mtime_window is not None and self.mtime_window <= 0:
            raise ConfigurationError("mtime window must be a positive number of seconds")

    @property
    def effective_thread_count(self) -> int:
        return self.thread_count or default_thread_count()

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "1KB",
            large_threshold_str: str = "1MB",
            sample_size_str: str = "64KB",
            thread_count: Optional[int] = None,
            mtime_window: Optional[int] = None,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        try:
            min_size = ConvertUtils.human_to_bytes(min_size_str)
            large_threshold = ConvertUtils.human_to_bytes(large_threshold_str)
            sample_size = ConvertUtils.human_to_bytes(sample_size_str)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        return ScanParams(
            root_dir=root_dir,
            min_size_bytes=min_size,
            large_file_threshold_bytes=large_threshold,
            sample_bytes=sample_size,
            thread_count=thread_count,
            mtime_window=mtime_window,
        )


def default_thread_count() -> int:
    """
    Default worker pool size: one thread per available core.
    Spinning disks usually do better with 1-2 threads (less seek thrashing),
    solid-state storage tolerates more threads than cores.
    """
    return os.cpu_count() or 4
