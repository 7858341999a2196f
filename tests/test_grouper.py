"""
Unit tests for FileGrouperImpl.
Verifies fingerprint grouping, singleton filtering and stable report order.
"""
import random

import pytest

from filededup.core import FileGrouperImpl, FileRecord, Fingerprint


def hashed(path, size, digest, sequence):
    return FileRecord(path=path, size=size, mtime=0.0, sequence=sequence,
                      fingerprint=Fingerprint(digest=digest, size=size))


class TestFileGrouperImpl:
    """Test grouping of fingerprinted records."""

    def test_groups_by_fingerprint_and_drops_singletons(self):
        records = [
            hashed("/dup1.txt", 100, b"hash1234", 0),
            hashed("/dup2.txt", 100, b"hash1234", 1),
            hashed("/unique.txt", 100, b"unique__", 2),
        ]

        groups = FileGrouperImpl().group(records)

        assert len(groups) == 1
        assert groups[0].paths == ["/dup1.txt", "/dup2.txt"]
        assert groups[0].fingerprint.digest == b"hash1234"
        assert groups[0].size == 100

    def test_no_reported_group_has_one_member(self):
        records = [hashed(f"/f{i}", 10, bytes([i % 3]) * 8, i) for i in range(10)]
        records.append(hashed("/lonely", 10, b"lonely!!", 10))

        groups = FileGrouperImpl().group(records)

        assert groups
        assert all(g.duplicate_count >= 2 for g in groups)
        assert "/lonely" not in {p for g in groups for p in g.paths}

    def test_size_mismatch_is_definitive(self):
        """Identical digests over different sizes never form a group."""
        records = [
            hashed("/empty.bin", 0, b"samehash", 0),
            hashed("/five_hundred.bin", 500, b"samehash", 1),
        ]

        assert FileGrouperImpl().group(records) == []

    def test_order_independent_of_arrival_order(self):
        """Completion order of the pool varies; the report must not."""
        records = [hashed(f"/dir/{name}", size, digest, seq) for seq, (name, size, digest) in enumerate([
            ("a", 300, b"AAAAAAAA"), ("b", 100, b"BBBBBBBB"), ("c", 300, b"AAAAAAAA"),
            ("d", 100, b"BBBBBBBB"), ("e", 300, b"CCCCCCCC"), ("f", 300, b"CCCCCCCC"),
        ])]
        expected = [g.paths for g in FileGrouperImpl().group(records)]

        for _ in range(10):
            shuffled = records[:]
            random.shuffle(shuffled)
            assert [g.paths for g in FileGrouperImpl().group(shuffled)] == expected

        # Larger groups by size first, then by first member's discovery order
        assert expected == [["/dir/a", "/dir/c"], ["/dir/e", "/dir/f"], ["/dir/b", "/dir/d"]]

    def test_path_breaks_sequence_ties(self):
        records = [
            hashed("/z", 10, b"samehash", 0),
            hashed("/a", 10, b"samehash", 0),
        ]

        assert FileGrouperImpl().group(records)[0].paths == ["/a", "/z"]

    def test_unhashed_record_rejected(self):
        with pytest.raises(ValueError, match="not been hashed"):
            FileGrouperImpl().group([FileRecord(path="/x", size=1, mtime=0.0)])
