"""Main unused import detector."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from zigimports.core.analysis import analyze_source, fix_source
from zigimports.core.errors import ZigImportsError
from zigimports.core.models import FileReport, ScanResult
from zigimports.core.protocols import ProgressCallback
from zigimports.core.rewrite import organize_imports
from zigimports.core.utils import iter_zig_files, read_source, write_source

logger = logging.getLogger(__name__)


class UnusedImportDetector:
    """Main class for detecting and removing unused imports in Zig files."""

    def __init__(
        self,
        fix: bool = False,
        organize: bool = False,
        jobs: int = 1,
        verbose: bool = False,
    ) -> None:
        if jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {jobs}")
        self.fix = fix
        self.organize = organize
        self.jobs = jobs
        self.verbose = verbose

        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def scan(
        self,
        paths: list[Path],
        progress_callback: ProgressCallback | None = None,
    ) -> ScanResult:
        """
        Scan paths for unused imports, fixing them when in fix mode.

        Args:
            paths: Files or directories to scan
            progress_callback: Receives one update per finished file

        Returns:
            ScanResult with one report per Zig file, in discovery order
        """
        start_time = time.time()

        files: list[Path] = []
        for path in paths:
            if not path.exists():
                raise ValueError(f"Path does not exist: {path}")
            files.extend(iter_zig_files(path))

        logger.debug(f"Found {len(files)} Zig files to scan")
        if progress_callback is not None:
            progress_callback.update("Scanning for unused imports...", total=len(files))

        reports = self._scan_files(files, progress_callback)

        return ScanResult(
            reports=reports,
            files_scanned=len(files),
            scan_duration=time.time() - start_time,
            fix=self.fix,
        )

    def _scan_files(
        self,
        files: list[Path],
        progress_callback: ProgressCallback | None,
    ) -> list[FileReport]:
        """Check files on a worker pool. Files share no state with each other."""
        reports: list[FileReport | None] = [None] * len(files)
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            futures = {
                executor.submit(self.check_file, path): index for index, path in enumerate(files)
            }
            for completed, future in enumerate(as_completed(futures), start=1):
                report = future.result()
                reports[futures[future]] = report
                if progress_callback is not None:
                    progress_callback.update(f"Checked {report.path}", completed=completed)
        return [report for report in reports if report is not None]

    def check_file(self, path: Path) -> FileReport:
        """Analyze one file. Errors are captured in the report, never raised."""
        logger.debug(f"Processing {path}")
        try:
            source = read_source(path)
            if self.fix:
                return self._fix_file(path, source)

            analysis = analyze_source(source)
            organized = None
            if self.organize and analysis.declarations:
                organized = organize_imports(source, analysis.declarations)
            return FileReport(
                path=path,
                declarations=analysis.declarations,
                unused=analysis.unused,
                organized=organized,
            )
        except (OSError, ZigImportsError) as e:
            logger.warning(f"Failed to process {path}: {e}")
            return FileReport(path=path, error=str(e))

    def _fix_file(self, path: Path, source: str) -> FileReport:
        declarations = analyze_source(source).declarations
        new_source, removed = fix_source(source)
        if removed:
            write_source(path, new_source)
            logger.debug(f"Rewrote {path} without {len(removed)} unused imports")
        return FileReport(path=path, declarations=declarations, removed=removed)
