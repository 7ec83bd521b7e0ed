"""Plain text formatter, one diagnostic per line."""

from zigimports.core.models import ScanResult
from zigimports.output.formatters.protocols import BaseFormatter


class TextFormatter(BaseFormatter):
    """Format results as compiler-style diagnostics."""

    def format(self, result: ScanResult) -> str:
        """
        Format scan results as text lines.

        Check mode prints ``<path>:<line>:<column>: <name> is unused`` per
        unused import, fix mode prints one summary line per rewritten file.
        """
        lines: list[str] = []
        for report in result.reports:
            if report.error is not None:
                lines.append(f"{report.path}: error: {report.error}")
            elif result.fix:
                count = len(report.removed)
                if count:
                    plural = "" if count == 1 else "s"
                    lines.append(f"{report.path} - Removed {count} unused import{plural}")
            else:
                for span in report.unused:
                    location = f"{report.path}:{span.start_line}:{span.start_column}"
                    lines.append(f"{location}: {span.name} is unused")
        return "\n".join(lines)
