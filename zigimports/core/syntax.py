"""Arena-backed syntax tree for Zig source code.

Parsing is done by tree-sitter with the Zig grammar. The concrete tree is
flattened into a token list and a flat list of the node kinds the import
analysis needs; everything else is dropped. Nodes refer to tokens by index,
so spans can be read off without keeping any tree-sitter object around.
"""

from __future__ import annotations

from typing import NamedTuple

import tree_sitter
import tree_sitter_zig

from zigimports.core.errors import ParseError
from zigimports.core.utils import ENCODING, ENCODING_ERRORS

ZIG_LANGUAGE = tree_sitter.Language(tree_sitter_zig.language())

# Node kinds
ROOT = "root"
BLOCK = "block"
CONTAINER_DECL = "container_decl"
TAGGED_UNION = "tagged_union"
VAR_DECL = "var_decl"
FN_DECL = "fn_decl"
IDENTIFIER_REF = "identifier"
FIELD_ACCESS = "field_access"

# Token tags that are not the token's own text
IDENTIFIER = "identifier"
BUILTIN = "builtin"
STRING_LITERAL = "string_literal"
CHAR_LITERAL = "char_literal"
EOF = "eof"

# tree-sitter node types
VARIABLE_DECLARATION = "variable_declaration"
FUNCTION_DECLARATION = "function_declaration"
FIELD_EXPRESSION = "field_expression"
CONTAINER_TYPES = frozenset(
    {"struct_declaration", "enum_declaration", "union_declaration", "opaque_declaration"}
)

# An identifier right after one of these names a member or a new binding.
BINDING_PREDECESSORS = frozenset({".", "const", "var", "fn"})

DECL_QUALIFIERS = frozenset({"export", "extern"})
MUTABILITY = frozenset({"const", "var"})
JUMPS = frozenset({"break", "continue"})


class Token(NamedTuple):
    tag: str
    start: int
    end: int


class VarDecl(NamedTuple):
    visib_token: int | None
    extern_export_token: int | None
    mut_token: int
    name_token: int
    semicolon_token: int
    init_start: int | None


class Node(NamedTuple):
    kind: str
    main_token: int
    first_token: int
    last_token: int
    var_decl: VarDecl | None = None


def location_at(source: str, offset: int) -> tuple[int, int]:
    """Return the 1-based line and 0-based column of ``offset``."""
    line_start = source.rfind("\n", 0, offset) + 1
    return source.count("\n", 0, offset) + 1, offset - line_start


class Ast:
    """Tokens and materialized nodes of one parsed source file."""

    def __init__(self, source: str, tokens: list[Token], nodes: list[Node]) -> None:
        self.source = source
        self.tokens = tokens
        self.nodes = nodes

    def token_span(self, token_index: int) -> tuple[int, int]:
        token = self.tokens[token_index]
        return token.start, token.end

    def token_slice(self, token_index: int) -> str:
        token = self.tokens[token_index]
        return self.source[token.start : token.end]

    def token_location(self, token_index: int) -> tuple[int, int]:
        """1-based line and 0-based column of a token's first character."""
        return location_at(self.source, self.tokens[token_index].start)

    def first_token(self, node_index: int) -> int:
        return self.nodes[node_index].first_token

    def last_token(self, node_index: int) -> int:
        return self.nodes[node_index].last_token

    def nodes_of_kind(self, *kinds: str) -> list[int]:
        return [index for index, node in enumerate(self.nodes) if node.kind in kinds]

    def var_decls(self) -> list[tuple[Node, VarDecl]]:
        """Variable declarations with their token layout, in source order."""
        return [(node, node.var_decl) for node in self.nodes if node.var_decl is not None]


def parse(source: str) -> Ast:
    """Parse ``source`` into an :class:`Ast`. Raises ``ParseError``."""
    data = source.encode(ENCODING, errors=ENCODING_ERRORS)
    parser = tree_sitter.Parser(ZIG_LANGUAGE)
    root = parser.parse(data).root_node
    builder = _AstBuilder(source, data)
    if root.has_error:
        raise builder.syntax_error(root)
    return builder.build(root)


class _AstBuilder:
    """Flattens a tree-sitter tree. The walk is iterative, so nesting depth is unbounded."""

    def __init__(self, source: str, data: bytes) -> None:
        self.source = source
        self.data = data
        self.tokens: list[Token] = []
        self.slots: list[Node | None] = []
        self.pending_decls: list[tuple[int, int, int]] = []
        # Byte offset -> str offset, only needed once multi-byte characters appear
        self.offsets: list[int] | None = None
        if len(data) != len(source):
            self.offsets = []
            for index, char in enumerate(source):
                width = len(char.encode(ENCODING, errors=ENCODING_ERRORS))
                self.offsets.extend([index] * width)
            self.offsets.append(len(source))

    def _offset(self, byte_offset: int) -> int:
        if self.offsets is None:
            return byte_offset
        return self.offsets[byte_offset]

    def syntax_error(self, root: tree_sitter.Node) -> ParseError:
        """Build a ``ParseError`` pointing at the first error in ``root``."""
        node, message = root, "invalid syntax"
        stack = [root]
        while stack:
            current = stack.pop()
            if current.is_missing:
                node, message = current, f"expected '{current.type}'"
                break
            if current.is_error:
                node = current
                break
            broken = [child for child in current.children if child.has_error or child.is_missing]
            stack.extend(reversed(broken))
        line, column = location_at(self.source, self._offset(node.start_byte))
        return ParseError(message, line, column)

    def build(self, root: tree_sitter.Node) -> Ast:
        # (node, first token) for nodes waiting to be closed; None marks a node to open
        stack: list[tuple[tree_sitter.Node, int | None]] = [(root, None)]
        while stack:
            node, first = stack.pop()
            if first is not None:
                self._close(node, first)
                continue
            if node.child_count == 0 or self._is_literal(node):
                self._add_token(node)
                continue
            stack.append((node, len(self.tokens)))
            stack.extend((child, None) for child in reversed(node.children))

        last = len(self.tokens) - 1
        end = len(self.source)
        self.tokens.append(Token(EOF, end, end))

        for slot, first, last_token in self.pending_decls:
            self.slots[slot] = self._var_decl_node(first, last_token)
        self._add_references()

        nodes = [Node(ROOT, 0, 0, max(last, 0))]
        nodes.extend(node for node in self.slots if node is not None)
        return Ast(self.source, self.tokens, nodes)

    def _is_literal(self, node: tree_sitter.Node) -> bool:
        # String nodes have quote/content children; keep them as one token.
        first_byte = self.data[node.start_byte : node.start_byte + 1]
        if not node.is_named or node.children[0].is_named:
            return False
        return first_byte in (b'"', b"'", b"\\")

    def _add_token(self, node: tree_sitter.Node) -> None:
        if node.start_byte == node.end_byte:
            return
        text = self.data[node.start_byte : node.end_byte]
        if text.startswith(b"//"):
            return
        if node.type == IDENTIFIER:
            tag = IDENTIFIER
        elif text[:1] in (b'"', b"\\"):
            tag = STRING_LITERAL
        elif text[:1] == b"'":
            tag = CHAR_LITERAL
        elif text[:1] == b"@":
            tag = BUILTIN
        else:
            tag = node.type
        self.tokens.append(Token(tag, self._offset(node.start_byte), self._offset(node.end_byte)))

    def _close(self, node: tree_sitter.Node, first: int) -> None:
        last = len(self.tokens) - 1
        if last < first:
            return
        if node.type == VARIABLE_DECLARATION:
            # The terminating ';' may follow the node, so finish once all tokens exist
            self.pending_decls.append((len(self.slots), first, last))
            self.slots.append(None)
        elif node.type == FUNCTION_DECLARATION:
            self.slots.append(Node(FN_DECL, first, first, last))
        elif node.type == FIELD_EXPRESSION:
            self.slots.append(Node(FIELD_ACCESS, first, first, last))
        elif self._has_braced_body(node):
            kind = BLOCK
            if node.type in CONTAINER_TYPES:
                kind = TAGGED_UNION if self._is_tagged_union(first, last) else CONTAINER_DECL
            self.slots.append(Node(kind, first, first, last))

    @staticmethod
    def _has_braced_body(node: tree_sitter.Node) -> bool:
        children = node.children
        return children[-1].type == "}" and any(child.type == "{" for child in children)

    def _is_tagged_union(self, first: int, last: int) -> bool:
        tags = [token.tag for token in self.tokens[first : min(first + 4, last) + 1]]
        if "union" not in tags:
            return False
        index = tags.index("union")
        return tags[index + 1 : index + 3] == ["(", "enum"]

    def _var_decl_node(self, first: int, last: int) -> Node | None:
        tokens = self.tokens
        visib_token = None
        if tokens[first].tag == "pub":
            visib_token = first
        elif first > 0 and tokens[first - 1].tag == "pub":
            visib_token = first = first - 1

        extern_export_token = None
        mut_token = first
        while tokens[mut_token].tag not in MUTABILITY:
            if tokens[mut_token].tag in DECL_QUALIFIERS:
                extern_export_token = mut_token
            mut_token += 1
            if mut_token > last:
                return None

        name_token = mut_token + 1
        if tokens[name_token].tag != IDENTIFIER or tokens[name_token + 1].tag == ",":
            # Destructuring, not a simple declaration
            return None

        semicolon_token = last if tokens[last].tag == ";" else last + 1
        if tokens[semicolon_token].tag != ";":
            return None

        init_start = None
        for index in range(name_token + 1, semicolon_token):
            if tokens[index].tag == "=":
                init_start = index + 1
                break

        decl = VarDecl(
            visib_token=visib_token,
            extern_export_token=extern_export_token,
            mut_token=mut_token,
            name_token=name_token,
            semicolon_token=semicolon_token,
            init_start=init_start,
        )
        return Node(VAR_DECL, mut_token, first, semicolon_token - 1, decl)

    def _add_references(self) -> None:
        tokens = self.tokens
        for index, token in enumerate(tokens):
            if token.tag != IDENTIFIER:
                continue
            if index > 0 and tokens[index - 1].tag in BINDING_PREDECESSORS:
                continue
            # Field, parameter and label names are followed by ':'
            if tokens[index + 1].tag == ":":
                continue
            if index > 1 and tokens[index - 1].tag == ":" and tokens[index - 2].tag in JUMPS:
                continue
            self.slots.append(Node(IDENTIFIER_REF, index, index, index))
