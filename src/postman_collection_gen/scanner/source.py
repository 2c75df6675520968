"""Source parsing with tree-sitter.

Every file is parsed with the TSX grammar, which covers plain JavaScript plus
JSX, type annotations, top-level ``await`` and ``import.meta``. tree-sitter
always produces a tree; one that contains error or missing nodes is reported
as a ``SourceParseError`` so callers can skip the file.
"""

import codecs
from functools import lru_cache

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from postman_collection_gen.errors import SourceParseError

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())


@lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(TSX_LANGUAGE)


def parse_source(source: str | bytes) -> Tree:
    """Parse source text into a syntax tree.

    Raises:
        SourceParseError: if the text is not valid UTF-8 or has syntax errors.
    """
    if isinstance(source, str):
        data = source.encode("utf-8")
    else:
        data = source
        try:
            data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(f"not valid UTF-8: {e}") from e

    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]

    tree = _parser().parse(data)
    if tree.root_node.has_error:
        row, column = _first_error_point(tree.root_node)
        raise SourceParseError(f"syntax error at line {row + 1}, column {column + 1}")
    return tree


def node_text(node: Node) -> str:
    """Return the source text covered by a node."""
    return node.text.decode("utf-8")


def _first_error_point(root: Node) -> tuple[int, int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point
        if node.has_error:
            stack.extend(reversed(node.children))
    return root.start_point
