"""
Unit tests for FingerprintFilter.
Verifies that size-unique files are exempted and mtime never suppresses hashing.
"""
from filededup.core import FileRecord, FingerprintFilter, PreGroupKey


def record(path, size, mtime=0.0, sequence=0):
    return FileRecord(path=path, size=size, mtime=mtime, sequence=sequence)


class TestFingerprintFilter:
    """Test size pre-grouping."""

    def test_drops_size_unique_files(self):
        records = [
            record("/a", 1024, sequence=0),
            record("/b", 1024, sequence=1),
            record("/c", 2048, sequence=2),
        ]

        size_filter = FingerprintFilter()
        pre_groups = size_filter.process(records)

        assert pre_groups == {PreGroupKey(1024): records[:2]}
        assert size_filter.exempted_count == 1

    def test_all_unique_sizes_yield_nothing(self):
        records = [record(f"/f{i}", 100 * (i + 1), sequence=i) for i in range(4)]

        size_filter = FingerprintFilter()

        assert size_filter.process(records) == {}
        assert size_filter.exempted_count == 4

    def test_pre_group_key_without_mtime_window(self):
        assert FingerprintFilter().pre_group_key(record("/a", 10, mtime=123.9)) == PreGroupKey(10, None)

    def test_pre_group_key_with_mtime_window(self):
        size_filter = FingerprintFilter(mtime_window=10)

        assert size_filter.pre_group_key(record("/a", 10, mtime=125.0)) == PreGroupKey(10, 12)
        assert size_filter.pre_group_key(record("/b", 10, mtime=129.9)) == PreGroupKey(10, 12)

    def test_mtime_difference_never_suppresses_hashing(self):
        """Same size, far apart mtimes: separate pre-groups, but both still candidates."""
        records = [
            record("/old", 4096, mtime=1_000.0, sequence=0),
            record("/new", 4096, mtime=9_000_000.0, sequence=1),
        ]

        size_filter = FingerprintFilter(mtime_window=2)
        pre_groups = size_filter.process(records)
        candidates = size_filter.candidates(pre_groups)

        assert len(pre_groups) == 2
        assert all(len(group) == 1 for group in pre_groups.values())
        assert {r.path for r in candidates} == {"/old", "/new"}
        assert size_filter.exempted_count == 0

    def test_one_second_resolution_differences_share_a_bucket(self):
        size_filter = FingerprintFilter(mtime_window=2)
        records = [
            record("/a", 4096, mtime=100.0, sequence=0),
            record("/b", 4096, mtime=101.0, sequence=1),
        ]

        assert len(size_filter.process(records)) == 1

    def test_candidates_follow_discovery_order_of_pre_groups(self):
        records = [
            record("/x1", 300, sequence=0),
            record("/y1", 100, sequence=1),
            record("/x2", 300, sequence=2),
            record("/y2", 100, sequence=3),
        ]

        size_filter = FingerprintFilter()
        candidates = size_filter.candidates(size_filter.process(records))

        assert [r.path for r in candidates] == ["/x1", "/x2", "/y1", "/y2"]

    def test_accepts_lazy_iterables(self):
        records = (record(f"/f{i}", 512, sequence=i) for i in range(3))

        pre_groups = FingerprintFilter().process(records)

        assert len(pre_groups[PreGroupKey(512)]) == 3
