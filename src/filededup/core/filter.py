"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filter.py
Fingerprint filter: cheap pre-grouping that exempts files from hashing.

A file whose size no other file shares cannot have a duplicate, so it is
dropped here and never read. The optional mtime bucket only splits the
surviving candidates into finer pre-groups (used for dispatch order and
statistics); it never removes a candidate whose size is shared.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional

from filededup.core.models import FileRecord, PreGroupKey

logger = logging.getLogger(__name__)


class FingerprintFilter:
    """
    Groups FileRecords by PreGroupKey and keeps only those whose size is shared.

    Args:
        mtime_window: Width in seconds of the coarse modification-time bucket.
                      None (default) disables mtime bucketing.
    """

    def __init__(self, mtime_window: Optional[int] = None):
        self.mtime_window = mtime_window
        self.exempted_count = 0

    def pre_group_key(self, record: FileRecord) -> PreGroupKey:
        if self.mtime_window is None:
            return PreGroupKey(record.size)
        return PreGroupKey(record.size, int(record.mtime // self.mtime_window))

    def group_by_size(self, records: Iterable[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups records by size, keeping only sizes shared by 2+ records."""
        return self._group_by(records, lambda r: r.size)

    def process(self, records: Iterable[FileRecord]) -> Dict[PreGroupKey, List[FileRecord]]:
        """
        Consume the full record sequence and return the pre-groups that need hashing.

        Every record whose size is shared by at least one other record appears in
        exactly one returned pre-group, even if it is alone in its mtime bucket.
        """
        records = list(records)
        size_groups = self.group_by_size(records)
        survivors = sum(len(group) for group in size_groups.values())
        self.exempted_count = len(records) - survivors

        pre_groups: Dict[PreGroupKey, List[FileRecord]] = defaultdict(list)
        for group in size_groups.values():
            for record in group:
                pre_groups[self.pre_group_key(record)].append(record)

        logger.debug(
            f"Pre-grouping: {len(records)} files, {survivors} candidates in "
            f"{len(pre_groups)} pre-groups, {self.exempted_count} exempted from hashing"
        )
        return dict(pre_groups)

    @staticmethod
    def candidates(pre_groups: Dict[PreGroupKey, List[FileRecord]]) -> List[FileRecord]:
        """
        Flatten pre-groups into the hashing work list.
        Records of the same pre-group stay adjacent; pre-groups follow the
        discovery order of their first member.
        """
        ordered = sorted(pre_groups.values(), key=lambda group: group[0].sequence)
        return [record for group in ordered for record in group]

    @staticmethod
    def _group_by(records: Iterable[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group records by any computed key.
        Groups with less than two members are dropped.
        """
        groups = defaultdict(list)
        for record in records:
            groups[key_func(record)].append(record)

        return {key: group for key, group in groups.items() if len(group) >= 2}
