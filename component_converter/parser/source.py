"""tree-sitter wrapper for TSX component sources and small node helpers."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterator, List, Optional

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from ..errors import ConverterSyntaxError

logger = logging.getLogger(__name__)

STRING_NODE_TYPES = frozenset({"string", "template_string"})


@lru_cache(maxsize=1)
def tsx_language() -> Language:
    return Language(tstypescript.language_tsx())


def _new_parser() -> Parser:
    return Parser(tsx_language())


class SourceUnit:
    """
    One parsed source file.

    Holds the text and its syntax tree. Construction raises
    :class:`ConverterSyntaxError` when the tree contains error or missing nodes.
    """

    def __init__(self, text: str, *, path: Optional[str] = None) -> None:
        self.text = text
        self.path = path
        self.tree: Tree = _new_parser().parse(text.encode("utf-8"))
        self._check_errors()

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def _check_errors(self) -> None:
        if not self.root.has_error:
            return
        bad = first_error_node(self.root)
        line, column, snippet = 1, 1, ""
        if bad is not None:
            line = bad.start_point[0] + 1
            column = bad.start_point[1] + 1
            lines = node_text(bad).strip().splitlines()
            snippet = lines[0][:40] if lines else ""
        kind = "Missing token" if bad is not None and bad.is_missing else "Unexpected syntax"
        message = f"{kind} in component source"
        if snippet:
            message = f"{message} near '{snippet}'"
        logger.debug(f"Syntax error at {line}:{column}")
        raise ConverterSyntaxError(
            message,
            path=self.path,
            line=line,
            column=column,
            hint="The source must be valid TSX/JSX.",
        )

    def top_level(self) -> Iterator[Node]:
        for child in self.root.named_children:
            if child.type != "comment":
                yield child


def first_error_node(node: Node) -> Optional[Node]:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error_node(child)
        if found is not None:
            return found
    return None


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def field(node: Node, name: str) -> Optional[Node]:
    return node.child_by_field_name(name)


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        node = inner[0] if inner else None
    return node


def string_value(node: Optional[Node]) -> Optional[str]:
    """
    The content of a string or template literal without its quotes.

    Template interpolations are kept as ``${...}`` text. Returns None for any
    other node type.
    """
    if node is None:
        return None
    if node.type == "string":
        return node_text(node)[1:-1]
    if node.type == "template_string":
        return node_text(node)[1:-1]
    return None


def property_key(node: Optional[Node]) -> Optional[str]:
    """Object key text for identifiers, quoted strings and numbers."""
    if node is None:
        return None
    if node.type in STRING_NODE_TYPES:
        return string_value(node)
    if node.type in ("property_identifier", "identifier", "number", "shorthand_property_identifier"):
        return node_text(node)
    if node.type == "computed_property_name":
        inner = named_children(node)
        return property_key(inner[0]) if inner else None
    return None


def walk_nodes(node: Node) -> Iterator[Node]:
    """Pre-order traversal of every named descendant, including ``node``."""
    yield node
    for child in node.named_children:
        yield from walk_nodes(child)


def call_name(node: Node) -> str:
    """Callee text of a call expression, e.g. ``React.forwardRef``."""
    return node_text(field(node, "function"))


__all__ = [
    "SourceUnit",
    "tsx_language",
    "first_error_node",
    "node_text",
    "named_children",
    "field",
    "unwrap_parens",
    "string_value",
    "property_key",
    "walk_nodes",
    "call_name",
]
