"""
Unit tests for HasherImpl with XXHashAlgorithmImpl.
Verifies full vs sampled fingerprints, 8-byte xxh3 digests and read failures.
"""
import os
import struct

import pytest
import xxhash

from filededup.core import FileRecord, HashError, HasherImpl, XXHashAlgorithmImpl

KIB = 1024
MIB = 1024 * KIB


def make_record(path, sequence=0) -> FileRecord:
    return FileRecord(path=str(path), size=os.path.getsize(path), mtime=os.path.getmtime(path), sequence=sequence)


def write(path, content: bytes):
    path.write_bytes(content)
    return make_record(path)


class TestFullContentHashing:
    """Files below the large-file threshold are hashed in full."""

    def test_same_content_produces_same_fingerprint(self, temp_dir):
        content = b"test content " * 1000
        r1 = write(temp_dir / "a.bin", content)
        r2 = write(temp_dir / "b.bin", content)

        hasher = HasherImpl(XXHashAlgorithmImpl())
        fp1 = hasher.compute_fingerprint(r1)
        fp2 = hasher.compute_fingerprint(r2)

        assert fp1 == fp2
        assert isinstance(fp1.digest, bytes)
        assert len(fp1.digest) == 8  # xxh3-64 = 8 bytes
        assert fp1.size == len(content)
        assert fp1.sampled is False

    def test_digest_is_xxh3_of_whole_content(self, temp_dir):
        """Streaming in small chunks yields the same digest as one-shot hashing."""
        content = os.urandom(50 * KIB + 17)
        record = write(temp_dir / "a.bin", content)

        hasher = HasherImpl(chunk_size=4 * KIB)

        assert hasher.compute_fingerprint(record).digest == xxhash.xxh3_64(content).digest()

    def test_interior_difference_detected_below_threshold(self, temp_dir):
        """Same size, same head and tail, different interior: different fingerprints."""
        size = 512 * KIB
        base = bytearray(b"H" * size)
        other = bytearray(base)
        other[size // 2] = ord("X")
        r1 = write(temp_dir / "a.bin", bytes(base))
        r2 = write(temp_dir / "b.bin", bytes(other))

        hasher = HasherImpl()

        assert hasher.compute_fingerprint(r1) != hasher.compute_fingerprint(r2)


class TestSampledHashing:
    """Files at or above the threshold are hashed from head, tail and size."""

    def test_interior_difference_is_an_accepted_false_positive(self, temp_dir):
        """Two 2 MiB files differing only in interior bytes share a fingerprint."""
        size = 2 * MIB
        base = bytearray(b"S" * size)
        other = bytearray(base)
        other[size // 2: size // 2 + 100] = b"Z" * 100
        r1 = write(temp_dir / "a.bin", bytes(base))
        r2 = write(temp_dir / "b.bin", bytes(other))

        hasher = HasherImpl()
        fp1 = hasher.compute_fingerprint(r1)
        fp2 = hasher.compute_fingerprint(r2)

        assert fp1 == fp2
        assert fp1.sampled is True

    def test_head_difference_detected(self, temp_dir):
        size = 2 * MIB
        base = bytearray(b"S" * size)
        other = bytearray(base)
        other[10] = ord("Z")
        r1 = write(temp_dir / "a.bin", bytes(base))
        r2 = write(temp_dir / "b.bin", bytes(other))

        hasher = HasherImpl()

        assert hasher.compute_fingerprint(r1) != hasher.compute_fingerprint(r2)

    def test_tail_difference_detected(self, temp_dir):
        size = 2 * MIB
        base = bytearray(b"S" * size)
        other = bytearray(base)
        other[-10] = ord("Z")
        r1 = write(temp_dir / "a.bin", bytes(base))
        r2 = write(temp_dir / "b.bin", bytes(other))

        hasher = HasherImpl()

        assert hasher.compute_fingerprint(r1) != hasher.compute_fingerprint(r2)

    def test_sampled_digest_covers_head_tail_and_size(self, temp_dir):
        content = os.urandom(16 * KIB)
        record = write(temp_dir / "a.bin", content)

        hasher = HasherImpl(large_file_threshold=8 * KIB, sample_bytes=2 * KIB)
        expected = xxhash.xxh3_64()
        expected.update(content[:2 * KIB])
        expected.update(content[-2 * KIB:])
        expected.update(struct.pack("<Q", len(content)))

        assert hasher.compute_fingerprint(record).digest == expected.digest()

    def test_threshold_boundary(self, temp_dir):
        """size == threshold is sampled, one byte below is hashed in full."""
        hasher = HasherImpl(large_file_threshold=4 * KIB, sample_bytes=1 * KIB)
        at = write(temp_dir / "at.bin", b"A" * (4 * KIB))
        below = write(temp_dir / "below.bin", b"A" * (4 * KIB - 1))

        assert hasher.compute_fingerprint(at).sampled is True
        assert hasher.compute_fingerprint(below).sampled is False

    def test_sample_overlap_on_small_large_file(self, temp_dir):
        """Head and tail samples may overlap when size < 2 * sample_bytes."""
        hasher = HasherImpl(large_file_threshold=1 * KIB, sample_bytes=1 * KIB)
        r1 = write(temp_dir / "a.bin", b"Q" * 1500)
        r2 = write(temp_dir / "b.bin", b"Q" * 1500)

        assert hasher.compute_fingerprint(r1) == hasher.compute_fingerprint(r2)


class TestHashFailures:
    """Unreadable files raise HashError and never a bare OSError."""

    def test_vanished_file_raises_hash_error(self, temp_dir):
        record = write(temp_dir / "gone.bin", b"X" * 2048)
        os.remove(record.path)

        with pytest.raises(HashError) as exc_info:
            HasherImpl().compute_fingerprint(record)

        assert exc_info.value.path == record.path
        assert isinstance(exc_info.value.cause, OSError)

    def test_size_change_raises_hash_error(self, temp_dir):
        record = write(temp_dir / "grown.bin", b"X" * 2048)
        (temp_dir / "grown.bin").write_bytes(b"X" * 4096)

        with pytest.raises(HashError, match="size changed"):
            HasherImpl().compute_fingerprint(record)

    def test_invalid_configuration_rejected(self):
        with pytest.raises(ValueError):
            HasherImpl(large_file_threshold=1024, sample_bytes=4096)
        with pytest.raises(ValueError):
            HasherImpl(sample_bytes=0)

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs not supported")
    def test_file_replaced_by_fifo_raises_without_blocking(self, temp_dir):
        """A path swapped for a FIFO after traversal must not hang a worker on open()."""
        record = write(temp_dir / "swapped.bin", b"X" * 2048)
        os.remove(record.path)
        os.mkfifo(record.path)

        with pytest.raises(HashError, match="No longer a regular file") as exc_info:
            HasherImpl().compute_fingerprint(record)

        assert exc_info.value.path == record.path

    def test_directory_in_place_of_file_raises_hash_error(self, temp_dir):
        record = write(temp_dir / "was_file", b"X" * 2048)
        os.remove(record.path)
        os.mkdir(record.path)

        with pytest.raises(HashError):
            HasherImpl().compute_fingerprint(record)
