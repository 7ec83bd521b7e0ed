from zigimports.output.formatters.csv_formatter import CsvFormatter
from zigimports.output.formatters.enums import OutputFormat
from zigimports.output.formatters.json_formatter import JsonFormatter
from zigimports.output.formatters.protocols import BaseFormatter
from zigimports.output.formatters.text_formatter import TextFormatter


def get_formatter(output_format: OutputFormat) -> BaseFormatter:
    """Get the appropriate formatter for the output format."""
    formatters = {
        OutputFormat.TEXT: TextFormatter(),
        OutputFormat.JSON: JsonFormatter(),
        OutputFormat.CSV: CsvFormatter(),
    }

    return formatters[output_format]
