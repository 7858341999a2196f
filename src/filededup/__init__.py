"""
filededup: fast duplicate file finder.

Core features:
- Size pre-grouping so that files with a unique size are never read
- xxh3-64 fingerprints: full content for small files, head/tail samples for large ones
- Parallel hashing on a bounded thread pool with progress reporting
- Safe deletion to system trash (via send2trash), always left to the caller
- CLI interface for headless/server usage
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("filededup")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from filededup.commands import ScanCommand
from filededup.core import (
    scan, ScanParams, ScanResult, DuplicateGroup, FileRecord, Fingerprint, ScanWarning,
    ConfigurationError)
from filededup.utils.convert_utils import ConvertUtils
from filededup.services.duplicate_service import DuplicateService
from filededup.services.file_service import FileService

__all__ = [
    "scan",
    "ScanCommand",
    "ScanParams",
    "ScanResult",
    "DuplicateGroup",
    "FileRecord",
    "Fingerprint",
    "ScanWarning",
    "ConfigurationError",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]
