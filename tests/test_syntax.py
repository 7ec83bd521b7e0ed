import pytest

from zigimports.core.errors import ParseError
from zigimports.core.syntax import (
    BLOCK,
    CONTAINER_DECL,
    FIELD_ACCESS,
    FN_DECL,
    IDENTIFIER_REF,
    TAGGED_UNION,
    VAR_DECL,
    location_at,
    parse,
)

KITCHEN_SINK = """\
const std = @import("std");
const Allocator = std.mem.Allocator;

pub const Error = error{ OutOfMemory, Invalid };

const Point = extern struct {
    x: f32 = 0,
    y: f32 = 0,

    pub fn len(self: *const Point) f32 {
        return @sqrt(self.x * self.x + self.y * self.y);
    }
};

const Shape = union(enum) {
    circle: f32,
    square: Point,
    empty,
};

fn sum(items: []const u32) u64 {
    var total: u64 = 0;
    var i: usize = 0;
    while (i < items.len) : (i += 1) {
        total += items[i];
    }
    for (items) |item| {
        if (item % 2 == 0) {
            total += item;
        } else {
            continue;
        }
    }
    return total;
}

fn load(allocator: Allocator, size: usize) Error![]u8 {
    const buf = allocator.alloc(u8, size) catch |err| switch (err) {
        error.OutOfMemory => return error.OutOfMemory,
    };
    errdefer allocator.free(buf);
    defer {
        std.debug.print("done\\n", .{});
    }
    const value = blk: {
        break :blk @as(u8, 1);
    };
    buf[0] = value;
    return buf;
}

test "sum" {
    try std.testing.expectEqual(@as(u64, 3), sum(&[_]u32{ 1, 2 }));
}
"""


def _references(source: str) -> list[str]:
    tree = parse(source)
    return [tree.token_slice(tree.first_token(i)) for i in tree.nodes_of_kind(IDENTIFIER_REF)]


def test_parse_kitchen_sink():
    tree = parse(KITCHEN_SINK)
    kinds = {node.kind for node in tree.nodes}
    assert {BLOCK, CONTAINER_DECL, TAGGED_UNION, VAR_DECL, FN_DECL, IDENTIFIER_REF} <= kinds
    assert FIELD_ACCESS in kinds


def test_import_declaration_tokens():
    source = 'const std = @import("std");'
    tree = parse(source)
    assert [token.tag for token in tree.tokens] == [
        "const",
        "identifier",
        "=",
        "builtin",
        "(",
        "string_literal",
        ")",
        ";",
        "eof",
    ]
    assert [tree.token_slice(i) for i in range(len(tree.tokens) - 1)] == [
        "const",
        "std",
        "=",
        "@import",
        "(",
        '"std"',
        ")",
        ";",
    ]
    assert tree.tokens[-1].start == len(source)


def test_comments_are_not_tokens():
    tree = parse("//! module docs\n/// item docs\nconst x = 1; // trailing\n")
    slices = [tree.token_slice(i) for i in range(len(tree.tokens) - 1)]
    assert slices == ["const", "x", "=", "1", ";"]


def test_var_decl_tokens():
    tree = parse('pub const std = @import("std");\nextern "c" var errno: c_int;\n')
    decls = [tree.nodes[i] for i in tree.nodes_of_kind(VAR_DECL)]
    assert len(decls) == 2

    std_decl, errno_decl = decls
    assert tree.token_slice(std_decl.first_token) == "pub"
    assert std_decl.var_decl.visib_token is not None
    assert std_decl.var_decl.extern_export_token is None
    assert tree.token_slice(std_decl.var_decl.name_token) == "std"
    assert tree.token_slice(std_decl.var_decl.semicolon_token) == ";"
    assert tree.token_slice(std_decl.last_token) == ")"

    assert tree.token_slice(errno_decl.var_decl.extern_export_token) == "extern"
    assert errno_decl.var_decl.init_start is None


def test_var_decls_are_in_source_order():
    tree = parse("const a = 1;\nconst S = struct {\n    const b = 2;\n};\nconst c = 3;\n")
    names = [tree.token_slice(decl.name_token) for _, decl in tree.var_decls()]
    assert names.index("a") < names.index("S") < names.index("c")
    assert "b" in names


def test_binding_names_are_not_references():
    source = """\
fn add(lhs: u32, rhs: u32) u32 {
    for (list) |item| {
        _ = item;
    }
    return other;
}
"""
    refs = _references(source)
    assert "add" not in refs
    assert "lhs" not in refs
    assert "rhs" not in refs
    assert "item" in refs  # the use inside the loop body
    assert "list" in refs
    assert "other" in refs


def test_member_names_and_literals_are_not_references():
    refs = _references("const v = .{ .field = other.member, .tag = .literal };\n")
    assert refs == ["other"]


def test_field_access_first_token_is_root():
    tree = parse("const x = a.b.c;\n")
    roots = [tree.token_slice(tree.first_token(i)) for i in tree.nodes_of_kind(FIELD_ACCESS)]
    assert roots
    assert set(roots) == {"a"}


def test_labels_are_not_references():
    assert _references("const x = blk: {\n    break :blk 1;\n};\n") == []


def test_switch_operand_and_prongs():
    source = """\
fn f(x: E) u8 {
    return switch (x) {
        .a, .b => 1,
        .c => |payload| payload,
        else => 0,
    };
}
"""
    refs = _references(source)
    assert "E" in refs
    assert refs.count("x") == 1
    assert "a" not in refs
    assert "c" not in refs
    assert "payload" in refs


def test_container_field_types_are_references():
    refs = _references("const S = struct { a: u8, b: Foo };\n")
    assert "Foo" in refs
    assert "a" not in refs
    assert "b" not in refs


def test_offsets_count_characters_not_bytes():
    source = 'const greeting = "héllo wörld";\nconst std = @import("std");\n'
    tree = parse(source)
    names = [tree.token_slice(decl.name_token) for _, decl in tree.var_decls()]
    assert names == ["greeting", "std"]
    assert tree.token_span(tree.var_decls()[1][0].first_token)[0] == source.index("const std")


def test_deep_else_if_chain_parses():
    branches = "".join(
        f"    }} else if (x == {i}) {{\n        y = {i};\n" for i in range(1, 400)
    )
    source = (
        "fn f(x: u32) u32 {\n    var y: u32 = 0;\n    if (x == 0) {\n        y = 0;\n"
        + branches
        + "    }\n    return y;\n}\n"
    )
    tree = parse(source)
    assert len(tree.nodes_of_kind(BLOCK)) == 401


@pytest.mark.parametrize(
    "source",
    [
        "const = 5;\n",
        "fn main() void {\n",
        'const x = @import("x")\n',
        "const S = struct { a: u8 b: u8 };\n",
        "const x = );\n",
    ],
)
def test_malformed_source_raises(source):
    with pytest.raises(ParseError):
        parse(source)


def test_parse_error_points_at_the_bad_line():
    with pytest.raises(ParseError) as excinfo:
        parse("const x = 1;\nconst $ = 2;\n")
    assert excinfo.value.line == 2
    assert str(excinfo.value).startswith("2:")


def test_location_at():
    source = "ab\ncd\n"
    assert location_at(source, 0) == (1, 0)
    assert location_at(source, 4) == (2, 1)
    assert location_at(source, 6) == (3, 0)
