"""Sort order for organizing imports."""

from zigimports.core.models import DeclarationSpan, ImportKind

KIND_ORDER = {kind: position for position, kind in enumerate(ImportKind)}


def import_sort_key(span: DeclarationSpan) -> tuple[int, str, str, int, int, int]:
    """
    Sort key giving a total order over imports of one file.

    Kind first, then module path, then whatever follows the path (so
    ``@import("x").A`` sorts before ``@import("x").B``), then fewer dots,
    then shorter path, and finally the source line.
    """
    return (
        KIND_ORDER[span.kind],
        span.module,
        span.extra,
        span.module.count("."),
        len(span.module),
        span.start_line,
    )


def sort_imports(imports: list[DeclarationSpan]) -> list[DeclarationSpan]:
    return sorted(imports, key=import_sort_key)
