"""Reference scan deciding which imports are used."""

import logging

from zigimports.core.models import DeclarationSpan
from zigimports.core.syntax import FIELD_ACCESS, IDENTIFIER_REF, Ast

logger = logging.getLogger(__name__)


def find_unused_imports(tree: Ast, imports: list[DeclarationSpan]) -> list[DeclarationSpan]:
    """
    Return the removable imports whose name is never referenced.

    Every identifier node and the root token of every field access counts as
    a reference. Binding sites are not identifier nodes, so a declaration
    never counts as its own use. Shadowing is not modeled: a local that
    reuses an import's name keeps the import alive.

    Excluded (pub/extern/export) declarations are never returned.
    """
    candidates = [span for span in imports if not span.is_excluded]
    used = {span.name: False for span in candidates}

    for index in tree.nodes_of_kind(IDENTIFIER_REF, FIELD_ACCESS):
        identifier = tree.token_slice(tree.first_token(index))
        if identifier in used and not used[identifier]:
            logger.debug(f"Global {identifier} is being used")
            used[identifier] = True

    unused = [span for span in candidates if not used[span.name]]
    for span in unused:
        logger.debug(f"Found unused identifier: {span.name}")
    return unused
