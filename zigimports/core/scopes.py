"""Block span extraction."""

import logging

from zigimports.core.models import BlockSpan
from zigimports.core.syntax import BLOCK, CONTAINER_DECL, TAGGED_UNION, Ast

logger = logging.getLogger(__name__)

SCOPE_KINDS = (BLOCK, CONTAINER_DECL, TAGGED_UNION)


def find_block_spans(tree: Ast) -> list[BlockSpan]:
    """Collect the span of every block, container body and tagged union body.

    Nesting is not tracked: a position inside a nested block is also inside
    every enclosing span, so plain interval tests are enough.
    """
    spans: list[BlockSpan] = []
    for index in tree.nodes_of_kind(*SCOPE_KINDS):
        lbrace = tree.first_token(index)
        rbrace = tree.last_token(index)
        span = BlockSpan(start=tree.token_span(lbrace)[0], end=tree.token_span(rbrace)[1])
        spans.append(span)
        if logger.isEnabledFor(logging.DEBUG):
            start_line, start_column = tree.token_location(lbrace)
            end_line, end_column = tree.token_location(rbrace)
            logger.debug(
                f"Block statement from {start_line}:{start_column} ({span.start}) "
                f"to {end_line}:{end_column + 1} ({span.end})"
            )
    return spans


def is_inside_block(blocks: list[BlockSpan], position: int) -> bool:
    """True when ``position`` lies in any block, i.e. the statement is not global."""
    return any(block.contains(position) for block in blocks)
