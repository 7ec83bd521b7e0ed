"""Data models for unused import detection."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ImportKind(str, Enum):
    """Coarse grouping of an import, derived from its module path only.

    Declaration order is the sort order used when organizing imports.
    """

    BUILTIN = "builtin"
    THIRD_PARTY = "third_party"
    LOCAL = "local"
    SPECIFIC = "specific"


class BlockSpan(BaseModel):
    """Offset range of one lexical block or container body."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    def contains(self, position: int) -> bool:
        return self.start <= position <= self.end


class DeclarationSpan(BaseModel):
    """A module-level declaration bound to an ``@import`` expression.

    ``start``/``end`` cover the whole removable statement, including the
    trailing newlines absorbed when the statement sits on its own lines.
    Line and column fields are for diagnostics only.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    start: int
    end: int
    statement_end: int
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    module: str
    module_offset: int
    kind: ImportKind
    import_text: str
    is_excluded: bool = False

    @property
    def extra(self) -> str:
        """Text following the module path, e.g. ``").Sub"`` for ``@import("x").Sub``."""
        return self.import_text[self.module_offset + len(self.module) :]


class FileReport(BaseModel):
    """Outcome of analyzing (and possibly fixing) one file."""

    path: Path
    declarations: list[DeclarationSpan] = Field(default_factory=list)
    unused: list[DeclarationSpan] = Field(default_factory=list)
    removed: list[DeclarationSpan] = Field(default_factory=list)
    organized: str | None = None
    error: str | None = None


class ScanResult(BaseModel):
    """Results of scanning for unused imports."""

    reports: list[FileReport]
    files_scanned: int
    scan_duration: float
    fix: bool = False

    @property
    def unused_count(self) -> int:
        return sum(len(report.unused) for report in self.reports)

    @property
    def removed_count(self) -> int:
        return sum(len(report.removed) for report in self.reports)

    @property
    def declarations_count(self) -> int:
        return sum(len(report.declarations) for report in self.reports)

    @property
    def failed_files(self) -> list[FileReport]:
        return [report for report in self.reports if report.error is not None]
