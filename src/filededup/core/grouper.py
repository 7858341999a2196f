"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Aggregates fingerprinted records into duplicate groups.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from filededup.core.models import DuplicateGroup, FileRecord, Fingerprint

logger = logging.getLogger(__name__)


class FileGrouperImpl:
    """
    Groups fingerprinted records by Fingerprint and keeps groups of 2+ files.

    The executor delivers records in completion order, which differs from run
    to run. Members are therefore ordered by dispatch (discovery) sequence with
    the full path as tie-break, and groups by descending size, then by their
    first member, so an unchanged tree always yields the same report.
    """

    def group_by_fingerprint(self, records: Iterable[FileRecord]) -> Dict[Fingerprint, List[FileRecord]]:
        groups = defaultdict(list)
        for record in records:
            if record.fingerprint is None:
                raise ValueError(f"Record has not been hashed: {record.path}")
            groups[record.fingerprint].append(record)

        return {fp: files for fp, files in groups.items() if len(files) >= 2}

    def group(self, records: Iterable[FileRecord]) -> List[DuplicateGroup]:
        result = [
            DuplicateGroup(fingerprint=fp, files=sorted(files, key=self._member_key))
            for fp, files in self.group_by_fingerprint(records).items()
        ]
        result.sort(key=lambda g: (-g.size,) + self._member_key(g.files[0]))

        logger.debug(f"Found {len(result)} duplicate groups")
        return result

    @staticmethod
    def _member_key(record: FileRecord):
        return record.sequence, record.path
