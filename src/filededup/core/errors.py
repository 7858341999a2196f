"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy of the scan engine.

Only ConfigurationError ever reaches the caller of a scan. HashError is raised
per file by the hasher and always turned into a ScanWarning by the executor.
"""
from typing import Optional


class ScanError(RuntimeError):
    """Base class for all engine errors."""


class ConfigurationError(ScanError):
    """Invalid scan parameters or an unusable root directory. The scan never starts."""


class HashError(ScanError):
    """A file could not be hashed (vanished, unreadable, or changed size)."""

    def __init__(self, path: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{message}: {path}")
        self.path = path
        self.reason = message
        self.cause = cause
