"""Discovery and classification of global ``@import`` declarations."""

from __future__ import annotations

import logging

from zigimports.core.models import BlockSpan, DeclarationSpan, ImportKind
from zigimports.core.scopes import find_block_spans, is_inside_block
from zigimports.core.syntax import BUILTIN, STRING_LITERAL, Ast, Node, VarDecl, location_at

logger = logging.getLogger(__name__)

BUILTIN_MODULES = frozenset({"std", "root", "builtin"})
LOCAL_SUFFIX = ".zig"
IMPORT_BUILTIN = "@import"


def classify_module(module: str) -> ImportKind:
    """Map a module path to its import kind."""
    if module in BUILTIN_MODULES:
        return ImportKind.BUILTIN
    if module.endswith(LOCAL_SUFFIX):
        return ImportKind.LOCAL
    if "." in module:
        return ImportKind.SPECIFIC
    return ImportKind.THIRD_PARTY


def find_imports(tree: Ast, blocks: list[BlockSpan] | None = None) -> list[DeclarationSpan]:
    """
    Find every global declaration whose initializer contains ``@import``.

    Declarations nested in a block or container are skipped. ``pub``,
    ``export`` and ``extern`` declarations are returned with
    ``is_excluded`` set so callers can list them without ever touching them.

    Args:
        tree: Parsed source file
        blocks: Block spans of ``tree``; computed when omitted

    Returns:
        Declarations in source order
    """
    if blocks is None:
        blocks = find_block_spans(tree)

    imports: list[DeclarationSpan] = []
    for node, decl in tree.var_decls():
        span = _declaration_span(tree, node, decl, blocks)
        if span is not None:
            imports.append(span)
    return imports


def _declaration_span(
    tree: Ast, node: Node, decl: VarDecl, blocks: list[BlockSpan]
) -> DeclarationSpan | None:
    source = tree.source
    start = tree.token_span(node.first_token)[0]
    line, column = tree.token_location(node.first_token)

    if is_inside_block(blocks, start):
        logger.debug(f"Skipping global on line {line}; it's inside a block")
        return None

    located = _locate_import(tree, decl.name_token, decl.semicolon_token, blocks)
    if located is None:
        return None
    import_token, module_token = located

    is_excluded = decl.visib_token is not None or decl.extern_export_token is not None
    if is_excluded:
        logger.debug(f"Import on line {line} is pub/extern/export, it will be left alone")

    import_start = tree.token_span(import_token)[0]
    import_end = tree.token_span(decl.semicolon_token - 1)[1]
    literal_start, literal_end = tree.token_span(module_token)
    # Strip the quotes
    module = source[literal_start + 1 : literal_end - 1]

    statement_end = tree.token_span(decl.semicolon_token)[1]
    end = absorb_trailing_newlines(source, start, statement_end)

    end_line, end_column = location_at(source, end)
    return DeclarationSpan(
        name=tree.token_slice(decl.name_token),
        start=start,
        end=end,
        statement_end=statement_end,
        start_line=line,
        start_column=column,
        end_line=end_line,
        end_column=end_column,
        module=module,
        module_offset=literal_start + 1 - import_start,
        kind=classify_module(module),
        import_text=source[import_start:import_end],
        is_excluded=is_excluded,
    )


def absorb_trailing_newlines(source: str, start: int, statement_end: int) -> int:
    """
    Extend a statement ending at ``statement_end`` over its line break.

    A statement with a blank line above and below is its own little section;
    the blank line below goes with it so the section vanishes. At most two
    newlines are taken and nothing before ``start`` is touched.
    """
    end = statement_end
    if end < len(source) and source[end] == "\n":
        end += 1
        if (
            start >= 2
            and source[start - 1] == "\n"
            and source[start - 2] == "\n"
            and end < len(source)
            and source[end] == "\n"
        ):
            end += 1
    return end


def _locate_import(
    tree: Ast, name_token: int, semicolon_token: int, blocks: list[BlockSpan]
) -> tuple[int, int] | None:
    """Return the ``@import`` token and its path literal token, if any.

    Imports inside a nested body belong to that body, not to this declaration.
    """
    for token_index in range(name_token + 1, semicolon_token):
        token = tree.tokens[token_index]
        if token.tag != BUILTIN or tree.token_slice(token_index) != IMPORT_BUILTIN:
            continue
        if is_inside_block(blocks, token.start):
            continue
        module_token = token_index + 2
        opens_call = tree.tokens[token_index + 1].tag == "("
        if opens_call and tree.tokens[module_token].tag == STRING_LITERAL:
            return token_index, module_token
        logger.debug(f"Ignoring @import without a string literal path at offset {token.start}")
        return None
    return None
