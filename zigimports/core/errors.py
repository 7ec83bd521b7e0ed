"""Exceptions raised while analyzing and rewriting Zig sources."""


class ZigImportsError(Exception):
    """Base class for all zigimports errors."""


class ParseError(ZigImportsError):
    """Raised when a source file cannot be tokenized or parsed."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{line}:{column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class InvariantViolation(ZigImportsError):
    """Raised when internal bookkeeping is inconsistent. Indicates a bug."""


class OverlappingSpansError(InvariantViolation):
    """Raised when two declaration spans selected for removal overlap."""
