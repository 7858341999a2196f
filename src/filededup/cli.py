#!/usr/bin/env python3
"""
filededup CLI: Command line interface for duplicate file detection and removal.
The engine only reports duplicate groups; removal happens here, after the user
chose what to remove. Deletion moves files to system trash, never permanent erase.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, NoReturn, Optional

from filededup.commands import ScanCommand
from filededup.core.errors import ConfigurationError
from filededup.core.models import DuplicateGroup, ScanParams, ScanResult, ScanWarning
from filededup.help_texts import (
    EPILOG_TEXT, LARGE_THRESHOLD_HELP_TEXT, MTIME_WINDOW_HELP_TEXT, THREADS_HELP_TEXT)
from filededup.services.duplicate_service import DuplicateService
from filededup.services.file_service import FileService
from filededup.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="filededup",
            description="filededup: Fast duplicate file finder with safe deletion",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            default=".",
            type=str,
            help="Directory to scan for duplicates. Default: current directory"
        )

        # Scan options
        parser.add_argument(
            "--min-size", "-m",
            default="1KB",
            type=str,
            metavar='',
            help="Minimum file size, inclusive (e.g., 500KB, 1MB). Default: 1KB"
        )
        parser.add_argument(
            "--large-threshold",
            default="1MB",
            type=str,
            metavar='',
            help=LARGE_THRESHOLD_HELP_TEXT
        )
        parser.add_argument(
            "--sample-size",
            default="64KB",
            type=str,
            metavar='',
            help="Size of the head and tail samples of large files. Default: 64KB"
        )
        parser.add_argument(
            "--threads", "-t",
            default=0,
            type=int,
            metavar='',
            help=THREADS_HELP_TEXT
        )
        parser.add_argument(
            "--mtime-window",
            default=None,
            type=int,
            metavar='',
            help=MTIME_WINDOW_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--interactive",
            action="store_true",
            help="For each duplicate group, choose which files to move to trash"
        )
        parser.add_argument(
            "--keep-one",
            action="store_true",
            help="Keep the first file of each duplicate group and move the rest to trash. "
                 "Always shows preview before deletion for safety."
        )

        # Output options
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --keep-one (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.keep_one:
            self.error_exit("--force can only be used with --keep-one")

        if args.interactive and args.keep_one:
            self.error_exit("--interactive and --keep-one cannot be combined")

        # Prevent interactive confirmation in non-TTY environments
        if args.keep_one and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        for option, value in (("--min-size", args.min_size),
                              ("--large-threshold", args.large_threshold),
                              ("--sample-size", args.sample_size)):
            if not ConvertUtils.is_valid_size_format(value):
                self.error_exit(f"Invalid size format for {option}: '{value}'")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_human_readable(
                root_dir=str(Path(args.input).expanduser()),
                min_size_str=args.min_size,
                large_threshold_str=args.large_threshold,
                sample_size_str=args.sample_size,
                thread_count=args.threads,
                mtime_window=args.mtime_window,
            )
        except ConfigurationError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, completed: int, total: int) -> None:
        """CLI progress callback - shows hashing progress in console."""
        if total > 0:
            percent = (completed / total) * 100
            sys.stderr.write(f"\r  [Hashing] {completed}/{total} ({percent:.1f}%)")
            sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> ScanResult:
        """Execute the scan workflow."""
        command = ScanCommand()
        if self.verbose:
            print(f"Hashing with {params.effective_thread_count} threads...")

        try:
            result = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except ConfigurationError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print()
            print(result.stats.print_summary())

        return result

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Output duplicate groups as plain text in report order."""
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(len(g.files) for g in groups)
        wasted = sum(g.wasted_bytes for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files, "
              f"{ConvertUtils.bytes_to_human(wasted)} reclaimable)")

        for idx, group in enumerate(groups, 1):
            self._print_group(idx, group)

    @staticmethod
    def _print_group(idx: int, group: DuplicateGroup, numbered: bool = False) -> None:
        size_str = ConvertUtils.bytes_to_human(group.size)
        sampled = " | sampled" if group.fingerprint.sampled else ""
        print(f"\nGroup {idx} | Hash: {group.fingerprint.hex} | Size: {size_str} | Files: {len(group.files)}{sampled}")
        for num, file in enumerate(group.files, 1):
            prefix = f"[{num}] " if numbered else ""
            print(f"   {prefix}{file.path}")

    def output_warnings(self, warnings: List[ScanWarning]) -> None:
        """Report skipped paths after the results."""
        if self.quiet or not warnings:
            return
        print(f"\n{len(warnings)} path(s) skipped:", file=sys.stderr)
        for warning in warnings:
            print(f"  {warning}", file=sys.stderr)

    def execute_interactive(self, groups: List[DuplicateGroup]) -> None:
        """Ask, group by group, which files to move to trash."""
        if not groups:
            print("No duplicate groups found.")
            return

        deleted_count = 0
        failed_files = []
        for idx, group in enumerate(groups, 1):
            self._print_group(idx, group, numbered=True)
            selection = self._ask_selection(len(group.files))
            if not selection:
                continue

            for num in selection:
                path = group.files[num - 1].path
                if FileService.delete(path):
                    deleted_count += 1
                    print(f"   Deleted: {path}")
                else:
                    failed_files.append(path)
                    self.warning(f"Failed to delete {path}")

        print(f"\nMoved {deleted_count} file(s) to trash.")
        if failed_files:
            print(f"Failed to delete {len(failed_files)} file(s).")

    def _ask_selection(self, count: int) -> List[int]:
        """
        Read member numbers to delete. Empty input skips the group.
        Selecting every member is refused: at least one copy is always kept.
        """
        while True:
            response = input("Select files to DELETE (numbers separated by spaces, Enter to skip): ").strip()
            if not response:
                return []
            try:
                selection = sorted({int(token) for token in response.replace(",", " ").split()})
            except ValueError:
                self.warning("Please enter file numbers only.")
                continue
            if any(num < 1 or num > count for num in selection):
                self.warning(f"File numbers must be between 1 and {count}.")
                continue
            if len(selection) == count:
                self.warning("At least one file of the group must be kept.")
                continue
            return selection

    def execute_keep_one(self, groups: List[DuplicateGroup], force: bool = False) -> None:
        """Keep one file per group, delete the rest. Always shows preview before deletion."""
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return

        files_to_delete, _ = DuplicateService.keep_only_one_file_per_group(groups)
        space_saved_str = ConvertUtils.bytes_to_human(
            DuplicateService.calculate_space_savings(groups, files_to_delete))

        # Always show deletion preview before action (safety first)
        print()
        for idx, group in enumerate(groups, 1):
            size_str = ConvertUtils.bytes_to_human(group.size)
            print(f"Group {idx} | Size: {size_str} | Files: {len(group.files)}")
            print("-" * 60)
            print(f"   [KEEP] {group.files[0].path}")
            for file in group.files[1:]:
                print(f"   [DEL]  {file.path}")
            print()

        print("=" * 60)
        print(f"Summary: Keep 1 file per group ({len(groups)} files preserved, {len(files_to_delete)} files deleted)")
        print(f"Total space saved: {space_saved_str}")
        print()

        if force:
            print("WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return

        print(f"\nMoving {len(files_to_delete)} files to trash...")
        deleted, failed = FileService.delete_multiple(files_to_delete)

        if failed:
            print(f"\nPartial success: {len(deleted)}/{len(files_to_delete)} files moved to trash.")
            print(f"Failed to delete {len(failed)} file(s):")
            for path in failed[:5]:
                print(f"  • {os.path.basename(path)}")
            if len(failed) > 5:
                print(f"  ...and {len(failed) - 5} more files")
        else:
            print(f"Successfully moved {len(deleted)} files to trash.")
            print(f"Total space saved: {space_saved_str}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        logging.basicConfig(
            level=logging.DEBUG if self.verbose else logging.ERROR,
            format=LOG_FORMAT
        )

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        result = self.run_scan(params)

        if args.keep_one:
            self.execute_keep_one(result.groups, force=args.force)
        elif args.interactive:
            self.execute_interactive(result.groups)
        else:
            self.output_results(result.groups)

        self.output_warnings(result.warnings)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\nCompleted in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
