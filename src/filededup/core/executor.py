"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/executor.py
Parallel hashing of filtered candidates on a bounded thread pool.

Each candidate becomes one task that hashes the file and returns a new,
fingerprinted FileRecord. Results are matched to their input by the returned
record itself, never by completion order. The candidate list is materialized
before dispatch, so the pool queue never grows beyond it.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import List, Optional, Sequence, Tuple

from filededup.core.errors import HashError
from filededup.core.interfaces import ContentHasher, ProgressObserver, WarningSink
from filededup.core.models import FileRecord, ScanWarning, WarningKind, default_thread_count

logger = logging.getLogger(__name__)


class ProgressCounter:
    """
    Thread-safe completed/total counter.
    The observer is called under the same lock as the increment, so it sees a
    strictly increasing count and is never entered by two workers at once.
    An observer that raises is logged and ignored.
    """

    def __init__(self, total: int, observer: Optional[ProgressObserver] = None):
        self._total = total
        self._completed = 0
        self._observer = observer
        self._lock = threading.Lock()

    @property
    def total(self) -> int:
        return self._total

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def increment(self) -> int:
        with self._lock:
            self._completed += 1
            if self._observer:
                try:
                    self._observer(self._completed, self._total)
                except Exception:
                    logger.exception("Progress observer failed; hashing continues")
            return self._completed


class ParallelHashExecutor:
    """
    Applies a ContentHasher to every candidate using a fixed-size worker pool.
    One instance may run several scans, also concurrently: progress state is
    local to each run().

    Args:
        hasher: Shared, stateless content hasher
        thread_count: Pool size; None or 0 selects one thread per core.
                      Lower it on spinning disks, raise it on SSDs.
    """

    def __init__(self, hasher: ContentHasher, thread_count: Optional[int] = None):
        self.hasher = hasher
        self.thread_count = thread_count or default_thread_count()

    def run(
        self,
        records: Sequence[FileRecord],
        on_progress: Optional[ProgressObserver] = None,
        on_warning: Optional[WarningSink] = None,
    ) -> Tuple[List[FileRecord], List[ScanWarning]]:
        """
        Hash all records.

        An interrupt (KeyboardInterrupt) cancels every queued task and is
        re-raised at once; only files already being read are finished.

        Returns:
            A tuple containing:
                - Fingerprinted records, in arrival (completion) order
                - Warnings for records that could not be hashed
        """
        counter = ProgressCounter(len(records), on_progress)
        hashed: List[FileRecord] = []
        warnings: List[ScanWarning] = []

        if not records:
            return hashed, warnings

        logger.debug(f"Hashing {len(records)} files with {self.thread_count} threads")

        executor = ThreadPoolExecutor(max_workers=self.thread_count, thread_name_prefix="filededup-hash")
        try:
            task = partial(self._hash_one, counter=counter)
            future_to_record = {executor.submit(task, record): record for record in records}
            for future in as_completed(future_to_record):
                try:
                    hashed.append(future.result())
                except HashError as e:
                    warning = ScanWarning(path=e.path, kind=WarningKind.HASH, message=e.reason)
                    logger.warning(str(e))
                    warnings.append(warning)
                    if on_warning:
                        on_warning(warning)
        except BaseException:
            logger.debug("Hashing interrupted, cancelling queued tasks")
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        return hashed, warnings

    def _hash_one(self, record: FileRecord, counter: ProgressCounter) -> FileRecord:
        """Task body: one file, one fingerprint. Progress counts failures too."""
        try:
            return record.with_fingerprint(self.hasher.compute_fingerprint(record))
        finally:
            counter.increment()
