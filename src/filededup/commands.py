"""
Unified command orchestrator for scanning.
This is the SINGLE source of truth for the scan workflow used by the CLI.
"""
from typing import Callable, Optional

from filededup.core.engine import DeduplicationEngine
from filededup.core.models import ScanParams, ScanResult, ScanWarning


class ScanCommand:
    """
    Orchestrates the scan workflow:
    1. Build the engine from validated parameters
    2. Run the pipeline with progress and warning callbacks

    Usage:
        params = ScanParams.from_human_readable("~/Downloads", min_size_str="4K")
        result = ScanCommand().execute(
            params,
            progress_callback=cli_progress_printer,
            warning_callback=cli_warning_printer
        )
    """

    def __init__(self):
        self.engine: Optional[DeduplicationEngine] = None
        self.result: Optional[ScanResult] = None

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[int, int], None]] = None,
            warning_callback: Optional[Callable[[ScanWarning], None]] = None
    ) -> ScanResult:
        """
        Execute a scan with given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (completed: int, total: int) -> None, called from worker threads
            warning_callback: (warning: ScanWarning) -> None

        Returns:
            ScanResult with duplicate groups, warnings and statistics

        Raises:
            ConfigurationError: If the root directory cannot be scanned
        """
        self.engine = DeduplicationEngine(params)
        self.result = self.engine.scan(on_progress=progress_callback, on_warning=warning_callback)
        return self.result
