"""
Shared fixtures for scan engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'filededup' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 2 identical 1KB files + 1 copy in a subdirectory
    - 2 identical 2KB files
    - 2 unique files (unique sizes, never hashed)
    - 1 file with the same size as the 2KB pair but different content
    - 1 empty file and 1 file below the 1KB default minimum
    """
    files = {}

    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    files["same_size_other"] = temp_dir / "same_size_other.txt"
    files["same_size_other"].write_bytes(b"b" * 2048)

    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    files["tiny"] = temp_dir / "tiny.txt"
    files["tiny"].write_bytes(b"E" * 1023)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files
