"""JSON formatter for structured output."""

import json

from zigimports.core.models import ScanResult
from zigimports.output.formatters.protocols import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Format results as JSON."""

    def format(self, result: ScanResult) -> str:
        """Format scan results as JSON."""
        data = {
            "summary": {
                "files_scanned": result.files_scanned,
                "total_imports": result.declarations_count,
                "unused_imports_count": result.unused_count,
                "removed_imports_count": result.removed_count,
                "failed_files_count": len(result.failed_files),
                "scan_duration": result.scan_duration,
            },
            "unused_imports": [
                {
                    "path": str(report.path),
                    "name": span.name,
                    "module": span.module,
                    "kind": span.kind.value,
                    "line": span.start_line,
                    "column": span.start_column,
                    "removed": result.fix,
                }
                for report in result.reports
                for span in (report.removed if result.fix else report.unused)
            ],
            "errors": [
                {"path": str(report.path), "error": report.error} for report in result.failed_files
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
