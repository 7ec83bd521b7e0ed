"""CSV formatter for spreadsheet-compatible output."""

import csv
from io import StringIO

from zigimports.core.models import ScanResult
from zigimports.output.formatters.protocols import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Format results as CSV."""

    def format(self, result: ScanResult) -> str:
        """Format scan results as CSV."""
        output = StringIO()
        writer = csv.writer(output)

        # Write header
        writer.writerow(["File", "Import", "Module", "Kind", "Line", "Column"])

        # Write data
        for report in result.reports:
            for span in report.removed if result.fix else report.unused:
                writer.writerow(
                    [
                        str(report.path),
                        span.name,
                        span.module,
                        span.kind.value,
                        span.start_line,
                        span.start_column,
                    ]
                )

        return output.getvalue()
