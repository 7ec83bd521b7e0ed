"""In-memory analysis pipeline for a single source text."""

import logging
from typing import NamedTuple

from zigimports.core.classifier import find_imports
from zigimports.core.models import DeclarationSpan
from zigimports.core.rewrite import remove_imports
from zigimports.core.scopes import find_block_spans
from zigimports.core.syntax import location_at, parse
from zigimports.core.usage import find_unused_imports

logger = logging.getLogger(__name__)


class SourceAnalysis(NamedTuple):
    declarations: list[DeclarationSpan]
    unused: list[DeclarationSpan]


def analyze_source(source: str) -> SourceAnalysis:
    """Parse ``source`` and report its imports and the unused subset.

    Raises ``ParseError`` for malformed source.
    """
    tree = parse(source)
    blocks = find_block_spans(tree)
    declarations = find_imports(tree, blocks)
    unused = find_unused_imports(tree, declarations)
    return SourceAnalysis(declarations, unused)


def fix_source(source: str) -> tuple[str, list[DeclarationSpan]]:
    """
    Remove unused imports until none are left.

    Removing one import can leave another one unused, so the whole pipeline
    is re-run on the result until a pass finds nothing. Every pass removes
    at least one declaration, so the loop terminates.

    Returns:
        The rewritten source and every declaration removed, over all passes.
        Positions of removed declarations refer to the original ``source``.
    """
    original = source
    removed: list[DeclarationSpan] = []
    # (start in the original source, length) of every range cut so far
    cut: list[tuple[int, int]] = []
    passes = 0
    while True:
        unused = analyze_source(source).unused
        if not unused:
            break
        passes += 1
        logger.debug(f"Pass {passes}: removing {len(unused)} unused imports")
        source = remove_imports(source, unused)
        relocated = [_relocate(span, original, cut) for span in unused]
        removed.extend(relocated)
        cut = sorted(cut + [(span.start, span.end - span.start) for span in relocated])
    return source, removed


def _relocate(
    span: DeclarationSpan, original: str, cut: list[tuple[int, int]]
) -> DeclarationSpan:
    """Translate ``span`` from a partially fixed text back to ``original``."""
    shift = 0
    for start, length in cut:
        if start > span.start + shift:
            break
        shift += length
    if not shift:
        return span

    start = span.start + shift
    end = span.end + shift
    start_line, start_column = location_at(original, start)
    end_line, end_column = location_at(original, end)
    return span.model_copy(
        update={
            "start": start,
            "end": end,
            "statement_end": span.statement_end + shift,
            "start_line": start_line,
            "start_column": start_column,
            "end_line": end_line,
            "end_column": end_column,
        }
    )
