THREADS_HELP_TEXT = (
    "Number of hashing threads. Default: 0 (one per CPU core).\n"
    "  Spinning disks : use 1-2 to avoid seek thrashing\n"
    "  SSD / NVMe     : more threads than cores usually helps\n"
)

LARGE_THRESHOLD_HELP_TEXT = (
    "Files of at least this size are fingerprinted from their first and last\n"
    "samples plus their size instead of the full content (much faster, but two\n"
    "different files with equal size, head and tail are reported as duplicates).\n"
    "Default: 1MB"
)

MTIME_WINDOW_HELP_TEXT = (
    "Bucket candidates by modification time in windows of N seconds.\n"
    "Affects only the hashing order and statistics, never which files match."
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates in Downloads folder
  %(prog)s -i ~/Downloads

  Only consider files of at least 500KB, use 2 threads (spinning disk)
  %(prog)s -i ~/Downloads -m 500KB -t 2

  Choose interactively which copies to move to trash
  %(prog)s -i ~/Downloads --interactive

  Keep the first file of every group, trash the rest without confirmation (for scripts)
  %(prog)s -i ~/Downloads --keep-one --force > ~/Downloads/report.txt
"""
