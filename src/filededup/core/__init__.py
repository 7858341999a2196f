"""
Core scan engine: collector, filter, hasher, executor, grouper and pipeline orchestrator.

This package contains the performance-critical foundation of filededup:
- FileScannerImpl: lazy recursive traversal with minimum-size filter
- FingerprintFilter: size (and optional coarse mtime) pre-grouping
- HasherImpl + XXHashAlgorithmImpl: xxh3-64 full or head/tail-sampled fingerprints
- ParallelHashExecutor: bounded thread pool with thread-safe progress
- FileGrouperImpl: fingerprint grouping with stable report order
- DeduplicationEngine / scan(): the whole pipeline

All components are pure Python with no UI dependencies.
"""

from .errors import ScanError, ConfigurationError, HashError
from .models import (
    FileRecord, Fingerprint, PreGroupKey, DuplicateGroup, ScanWarning, WarningKind,
    ScanResult, ScanStats, ScanParams, Stage)
from .scanner import FileScannerImpl
from .filter import FingerprintFilter
from .hasher import HasherImpl, XXHashAlgorithmImpl
from .executor import ParallelHashExecutor, ProgressCounter
from .grouper import FileGrouperImpl
from .engine import DeduplicationEngine, scan

__all__ = [
    "ScanError",
    "ConfigurationError",
    "HashError",
    "FileRecord",
    "Fingerprint",
    "PreGroupKey",
    "DuplicateGroup",
    "ScanWarning",
    "WarningKind",
    "ScanResult",
    "ScanStats",
    "ScanParams",
    "Stage",
    "FileScannerImpl",
    "FingerprintFilter",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "ParallelHashExecutor",
    "ProgressCounter",
    "FileGrouperImpl",
    "DeduplicationEngine",
    "scan",
]
