"""Source rewriting: removing unused imports and organizing the rest."""

import logging
import re
from operator import attrgetter

from zigimports.core.classifier import absorb_trailing_newlines
from zigimports.core.errors import OverlappingSpansError
from zigimports.core.models import DeclarationSpan
from zigimports.core.ordering import sort_imports

logger = logging.getLogger(__name__)

TRAILING_COMMENT = re.compile(r"[ \t]*//[^\n]*")


def remove_imports(source: str, imports: list[DeclarationSpan]) -> str:
    """
    Splice every import span out of ``source``.

    All other text is kept verbatim and in order. Spans are processed in
    source order regardless of the order they are given in.

    Raises:
        OverlappingSpansError: if two spans intersect
    """
    for span in imports:
        logger.debug(
            f"Unused import statement from {span.start_line}:{span.start_column} ({span.start}) "
            f"to {span.end_line}:{span.end_column} ({span.end})"
        )
    return _splice(source, imports)


def organize_imports(source: str, imports: list[DeclarationSpan]) -> str:
    """
    Render ``source`` with its imports sorted and grouped at the top.

    Each group of same-kind imports is separated by one blank line. The rest
    of the file follows with the original import statements (and the blank
    lines they absorbed) taken out. Excluded declarations stay where they are.
    A comment on the same line as a statement moves with it.
    """
    candidates = sort_imports(
        [_with_trailing_comment(source, span) for span in imports if not span.is_excluded]
    )
    if not candidates:
        return source

    parts: list[str] = []
    current_kind = None
    for span in candidates:
        if current_kind is not None and span.kind != current_kind:
            # Ensure a newline between different import groups
            parts.append("\n")
        current_kind = span.kind
        parts.append(source[span.start : span.statement_end] + "\n")

    parts.append(_splice(source, candidates))
    return "".join(parts)


def _with_trailing_comment(source: str, span: DeclarationSpan) -> DeclarationSpan:
    match = TRAILING_COMMENT.match(source, span.statement_end)
    if match is None:
        return span
    statement_end = match.end()
    end = absorb_trailing_newlines(source, span.start, statement_end)
    return span.model_copy(update={"statement_end": statement_end, "end": end})


def _splice(source: str, spans: list[DeclarationSpan]) -> str:
    chunks: list[str] = []
    cursor = 0
    for span in sorted(spans, key=attrgetter("start")):
        if span.start < cursor:
            raise OverlappingSpansError(
                f"Import {span.name!r} at {span.start}..{span.end} overlaps "
                f"a previous span ending at {cursor}"
            )
        logger.debug(f"Keeping source from {cursor} to {span.start}")
        chunks.append(source[cursor : span.start])
        cursor = span.end
    chunks.append(source[cursor:])
    logger.debug(f"Keeping source from {cursor} to the end")
    return "".join(chunks)
