"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

engine.py
Pipeline-based duplicate detection:
    collect → pre-group by size → hash in parallel → group by fingerprint

Data only flows forward; each stage consumes the records of the previous one.
Per-file problems become ScanWarnings, only configuration errors abort a scan.
"""
import logging
import time
from typing import Optional

from filededup.core.executor import ParallelHashExecutor
from filededup.core.filter import FingerprintFilter
from filededup.core.grouper import FileGrouperImpl
from filededup.core.hasher import HasherImpl, XXHashAlgorithmImpl
from filededup.core.interfaces import HashAlgorithm, ProgressObserver, WarningSink
from filededup.core.models import (
    DEFAULT_LARGE_FILE_THRESHOLD, DEFAULT_MIN_SIZE, DEFAULT_SAMPLE_SIZE,
    ScanParams, ScanResult, ScanStats, ScanWarning, Stage)
from filededup.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


# =============================
# Main Engine Class
# =============================
class DeduplicationEngine:
    """
    Runs one scan per call to scan(). Holds no state between scans.
    """
    def __init__(self, params: ScanParams, algorithm: HashAlgorithm = None, grouper: FileGrouperImpl = None):
        self.params = params
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.grouper = grouper or FileGrouperImpl()

    def scan(
        self,
        on_progress: Optional[ProgressObserver] = None,
        on_warning: Optional[WarningSink] = None,
    ) -> ScanResult:
        """
        Args:
            on_progress: Called as (completed, total) from worker threads while hashing.
            on_warning: Called with every ScanWarning as soon as it is recorded.
        Returns:
            ScanResult with duplicate groups, warnings and per-stage statistics.
        Raises:
            ConfigurationError: if the root directory is missing or not a directory.
        """
        result = ScanResult()
        total_start_time = time.time()

        def record_warning(warning: ScanWarning) -> None:
            result.warnings.append(warning)
            if on_warning:
                on_warning(warning)

        # Validates the root before anything else runs
        collector = FileScannerImpl(
            self.params.root_dir,
            min_size=self.params.min_size_bytes,
            on_warning=record_warning,
        )
        logger.debug(f"Root directory: {collector.root_dir}")

        start_time = time.time()
        records = list(collector.collect())
        self._update_stats(result.stats, Stage.COLLECT, time.time() - start_time, 0, len(records))

        start_time = time.time()
        size_filter = FingerprintFilter(self.params.mtime_window)
        pre_groups = size_filter.process(records)
        candidates = size_filter.candidates(pre_groups)
        self._update_stats(result.stats, Stage.FILTER, time.time() - start_time, len(pre_groups), len(candidates))

        start_time = time.time()
        hasher = HasherImpl(
            self.algorithm,
            large_file_threshold=self.params.large_file_threshold_bytes,
            sample_bytes=self.params.sample_bytes,
        )
        executor = ParallelHashExecutor(hasher, self.params.thread_count)
        hashed, _ = executor.run(candidates, on_progress=on_progress, on_warning=record_warning)
        self._update_stats(result.stats, Stage.HASH, time.time() - start_time, 0, len(hashed))

        start_time = time.time()
        result.groups = self.grouper.group(hashed)
        self._update_stats(
            result.stats, Stage.GROUP, time.time() - start_time,
            len(result.groups), sum(g.duplicate_count for g in result.groups))

        result.stats.total_time = time.time() - total_start_time
        logger.info(
            f"Scan finished: {len(result.groups)} duplicate groups, "
            f"{len(result.warnings)} warnings, {result.stats.total_time:.2f}s"
        )
        return result

    @staticmethod
    def _update_stats(stats: ScanStats, stage: Stage, duration: float, groups: int, files: int):
        stats.update_stage(
            stage_name=stage.value,
            groups_found=groups,
            files_processed=files,
            duration=duration
        )


def scan(
    root_path: str,
    min_size_bytes: int = DEFAULT_MIN_SIZE,
    large_file_threshold_bytes: int = DEFAULT_LARGE_FILE_THRESHOLD,
    sample_bytes: int = DEFAULT_SAMPLE_SIZE,
    thread_count: Optional[int] = None,
    mtime_window: Optional[int] = None,
    on_progress: Optional[ProgressObserver] = None,
    on_warning: Optional[WarningSink] = None,
) -> ScanResult:
    """
    Find duplicate files under root_path.

    Usage:
        result = scan("/data/photos", thread_count=2)
        for group in result.groups:
            print(group.fingerprint.hex, group.paths)
        for warning in result.warnings:
            print(warning)
    """
    params = ScanParams(
        root_dir=root_path,
        min_size_bytes=min_size_bytes,
        large_file_threshold_bytes=large_file_threshold_bytes,
        sample_bytes=sample_bytes,
        thread_count=thread_count,
        mtime_window=mtime_window,
    )
    return DeduplicationEngine(params).scan(on_progress=on_progress, on_warning=on_warning)

