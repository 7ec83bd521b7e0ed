import csv
import json
from io import StringIO
from pathlib import Path

from zigimports.core.analysis import analyze_source
from zigimports.core.models import FileReport, ScanResult
from zigimports.output.formatters.enums import OutputFormat
from zigimports.output.formatters.formatter_factory import get_formatter

SOURCE = """\
const std = @import("std");
const one = @import("one.zig");
const two = @import("two");
"""


def _result(fix=False):
    analysis = analyze_source(SOURCE)
    spans = analysis.unused
    if fix:
        good = FileReport(
            path=Path("src/main.zig"), declarations=analysis.declarations, removed=spans
        )
        single = FileReport(path=Path("src/one.zig"), removed=spans[:1])
    else:
        good = FileReport(
            path=Path("src/main.zig"), declarations=analysis.declarations, unused=spans
        )
        single = FileReport(path=Path("src/one.zig"))
    broken = FileReport(path=Path("src/broken.zig"), error="1:10: invalid character")
    return ScanResult(reports=[good, single, broken], files_scanned=3, scan_duration=0.5, fix=fix)


def test_text_check_mode():
    output = get_formatter(OutputFormat.TEXT).format(_result())
    assert output.splitlines() == [
        "src/main.zig:1:0: std is unused",
        "src/main.zig:2:0: one is unused",
        "src/main.zig:3:0: two is unused",
        "src/broken.zig: error: 1:10: invalid character",
    ]


def test_text_fix_mode_pluralizes():
    output = get_formatter(OutputFormat.TEXT).format(_result(fix=True))
    assert output.splitlines() == [
        "src/main.zig - Removed 3 unused imports",
        "src/one.zig - Removed 1 unused import",
        "src/broken.zig: error: 1:10: invalid character",
    ]


def test_json_output():
    data = json.loads(get_formatter(OutputFormat.JSON).format(_result()))
    assert data["summary"]["files_scanned"] == 3
    assert data["summary"]["unused_imports_count"] == 3
    assert data["summary"]["failed_files_count"] == 1
    assert data["unused_imports"][1] == {
        "path": "src/main.zig",
        "name": "one",
        "module": "one.zig",
        "kind": "local",
        "line": 2,
        "column": 0,
        "removed": False,
    }
    assert data["errors"] == [{"path": "src/broken.zig", "error": "1:10: invalid character"}]


def test_csv_output():
    rows = list(csv.reader(StringIO(get_formatter(OutputFormat.CSV).format(_result()))))
    assert rows[0] == ["File", "Import", "Module", "Kind", "Line", "Column"]
    assert rows[1] == ["src/main.zig", "std", "std", "builtin", "1", "0"]
    assert rows[3] == ["src/main.zig", "two", "two", "third_party", "3", "0"]
    assert len(rows) == 4


def test_save_writes_file(tmp_path):
    target = tmp_path / "out.json"
    get_formatter(OutputFormat.JSON).save(_result(fix=True), target)
    data = json.loads(target.read_text())
    assert data["summary"]["removed_imports_count"] == 4
    assert all(entry["removed"] for entry in data["unused_imports"])
