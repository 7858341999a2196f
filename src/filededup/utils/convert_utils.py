"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size strings for the CLI and ScanParams. All units are binary: K, KB and KiB
all mean 1024 bytes.
"""
import re

UNIT_POWERS = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5}
DISPLAY_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

# number, then an optional unit letter with optional "B"/"iB", or a bare "B"
SIZE_PATTERN = re.compile(r"^(-?\d+(?:\.\d+)?)\s*(?:([KMGTP])(?:I?B)?|B)?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """1536 -> '1.50KB'. Negative input renders as '0B'."""
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in DISPLAY_UNITS:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parse '64KB', '1.5M', '2GiB' or a plain byte count.
        Raises ValueError for negative sizes or unparseable input.
        """
        text = size_str.strip().upper()
        match = SIZE_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid size format: '{size_str}'. Examples: 1000, 64K, 64KB, 64KiB, 1.5MB")

        number, unit = match.groups()
        value = float(number)
        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return int(value * 1024 ** UNIT_POWERS[unit or ""])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
        except ValueError:
            return False
        return True
