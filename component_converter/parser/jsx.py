"""Depth-first conversion of JSX syntax nodes into IR nodes."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from tree_sitter import Node

from ..ir.nodes import (
    CLASS_KEY,
    REF_KEY,
    SPREAD_KEY,
    Binding,
    BindingKind,
    ConditionalShow,
    Element,
    Fragment,
    IRNode,
    Slot,
    Text,
)
from ..mappings.primitives import PRIMITIVE_TO_HTML, native_tag_for
from .source import field, named_children, node_text, string_value, unwrap_parens

logger = logging.getLogger(__name__)

MARKUP_NODE_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
SLOT_EXPRESSIONS = frozenset({"children", "props.children"})
ATTRIBUTE_ALIASES = {"className": CLASS_KEY, "class": CLASS_KEY}


def is_markup(node: Optional[Node]) -> bool:
    node = unwrap_parens(node)
    return node is not None and node.type in MARKUP_NODE_TYPES


def is_event_attribute(name: str) -> bool:
    return len(name) > 2 and name.startswith("on") and name[2].isupper()


def jsx_text_value(raw: str) -> str:
    """
    Collapse a JSX text run the way React does: each line is trimmed and the
    non-empty lines are joined by a single space. Whitespace at either end
    survives only when no line break separates it from the neighbouring
    expression or element.
    """
    lines = raw.replace("\r\n", "\n").split("\n")
    kept: List[str] = []
    for index, line in enumerate(lines):
        words = " ".join(line.split())
        if index == 0 and line[:1].isspace():
            words = " " + words if words else " "
        if index == len(lines) - 1 and line[-1:].isspace() and not words.endswith(" "):
            words += " "
        if words.strip() or len(lines) == 1:
            kept.append(words)
    return " ".join(kept)


class JSXConverter:
    """
    Converts one component's returned markup into IR nodes.

    ``aliases`` maps local tag variables (``const Comp = asChild ? Slot : "button"``)
    to the tag they stand for. Wrapped primitives found in ``table`` are
    normalized to their native tag when ``normalize_primitives`` is set.
    """

    def __init__(
        self,
        *,
        component: str,
        warnings: List[str],
        aliases: Optional[Mapping[str, str]] = None,
        normalize_primitives: bool = True,
        table: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.component = component
        self.warnings = warnings
        self.aliases = dict(aliases or {})
        self.normalize_primitives = normalize_primitives
        self.table = table if table is not None else PRIMITIVE_TO_HTML

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def convert_root(self, node: Node) -> List[IRNode]:
        """Root markup; a top-level fragment contributes its children directly."""
        node = unwrap_parens(node)
        if node is None:
            return []
        if node.type == "jsx_element" and self._is_fragment(node):
            return self._convert_children(node)
        return self.convert(node)

    def convert(self, node: Node) -> List[IRNode]:
        node = unwrap_parens(node)
        if node is None:
            return []
        if node.type == "jsx_element":
            if self._is_fragment(node):
                return [Fragment(children=self._convert_children(node))]
            return [self._element(field(node, "open_tag"), node)]
        if node.type == "jsx_self_closing_element":
            return [self._element(node, None)]
        if node.type == "jsx_text":
            text = jsx_text_value(node_text(node))
            return [Text(text)] if text else []
        if node.type == "html_character_reference":
            return [Text(node_text(node))]
        if node.type == "jsx_expression":
            return self._expression_child(node)
        logger.debug(f"{self.component}: treating {node.type} as an expression")
        return [Text(node_text(node), is_expression=True)]

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    @staticmethod
    def _is_fragment(node: Node) -> bool:
        open_tag = field(node, "open_tag")
        return open_tag is not None and field(open_tag, "name") is None

    def _resolve_tag(self, raw: str) -> Element:
        tag = self.aliases.get(raw, raw)
        if "." in tag and self.normalize_primitives:
            native = native_tag_for(tag, self.table)
            if native is not None:
                return Element(tag=native, source_tag=tag)
            self.warnings.append(f"{self.component}: no native element mapped for <{tag}>")
        return Element(tag=tag)

    def _element(self, tag_node: Optional[Node], element_node: Optional[Node]) -> Element:
        if tag_node is None:
            return Element(tag="div")
        element = self._resolve_tag(node_text(field(tag_node, "name")))
        for attribute in named_children(tag_node):
            if attribute.type == "jsx_attribute":
                self._attribute(element, attribute)
            elif attribute.type == "jsx_expression":
                self._spread_attribute(element, attribute)
        if element_node is not None:
            children = self._convert_children(element_node)
            if children and element.is_void:
                self.warnings.append(
                    f"{self.component}: dropped children of void element <{element.tag}>"
                )
            elif children:
                element.children.extend(children)
        return element

    def _convert_children(self, node: Node) -> List[IRNode]:
        children: List[IRNode] = []
        for child in named_children(node):
            if child.type in ("jsx_opening_element", "jsx_closing_element"):
                continue
            children.extend(self.convert(child))
        return children

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _spread_attribute(self, element: Element, node: Node) -> None:
        inner = named_children(node)
        if not inner:
            return
        spread = inner[0]
        if spread.type == "spread_element":
            target = named_children(spread)
            element.bindings[SPREAD_KEY] = Binding(
                node_text(target[0]) if target else node_text(spread)[3:],
                BindingKind.SPREAD,
            )

    def _attribute(self, element: Element, node: Node) -> None:
        parts = named_children(node)
        if not parts:
            return
        name = node_text(parts[0])
        value = parts[1] if len(parts) > 1 else None
        if name == "children":
            logger.debug(f"{self.component}: children attribute absorbed into spread")
            return
        key = ATTRIBUTE_ALIASES.get(name, name)
        if value is None:
            element.static_attributes[key] = "true"
            return
        literal = string_value(value) if value.type == "string" else None
        if literal is not None:
            element.static_attributes[key] = literal
            return
        if value.type == "jsx_expression":
            inner = named_children(value)
            if not inner:
                return
            expression = inner[0]
            if expression.type == "string":
                element.static_attributes[key] = string_value(expression) or ""
                return
            code = node_text(expression)
        else:
            code = node_text(value)
        if key == REF_KEY:
            element.bindings[REF_KEY] = Binding(code)
        elif is_event_attribute(name):
            element.bindings[name] = Binding(code, BindingKind.EVENT)
        else:
            element.bindings[key] = Binding(code)

    # ------------------------------------------------------------------
    # Expression children
    # ------------------------------------------------------------------

    def _single(self, node: Node) -> Optional[IRNode]:
        nodes = self.convert(node)
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        return Fragment(children=nodes)

    def _expression_child(self, node: Node) -> List[IRNode]:
        inner = named_children(node)
        if not inner:
            return []
        expression = unwrap_parens(inner[0])
        if expression is None:
            return []
        text = node_text(expression)
        if text in SLOT_EXPRESSIONS:
            return [Slot()]
        if expression.type == "spread_element":
            return []
        if expression.type == "binary_expression" and node_text(field(expression, "operator")) == "&&":
            right = field(expression, "right")
            if is_markup(right):
                child = self._single(right)
                if child is not None:
                    return [ConditionalShow(guard=node_text(field(expression, "left")), child=child)]
        if expression.type == "ternary_expression":
            shown = self._ternary(expression)
            if shown:
                return shown
        return [Text(text, is_expression=True)]

    def _ternary(self, node: Node) -> List[IRNode]:
        condition = node_text(field(node, "condition"))
        consequence = field(node, "consequence")
        alternative = field(node, "alternative")
        shown: List[IRNode] = []
        if is_markup(consequence):
            child = self._single(consequence)
            if child is not None:
                shown.append(ConditionalShow(guard=condition, child=child))
        if is_markup(alternative):
            child = self._single(alternative)
            if child is not None:
                shown.append(ConditionalShow(guard=f"!({condition})", child=child))
        return shown


def returned_markup(function: Node) -> Optional[Node]:
    """
    The markup a component function returns.

    Handles expression bodies, parenthesized bodies and the last top-level
    ``return`` of a block body.
    """
    body = field(function, "body")
    if body is None:
        return None
    if body.type != "statement_block":
        body = unwrap_parens(body)
        return body if body is not None and body.type in MARKUP_NODE_TYPES else None
    found: Optional[Node] = None
    for statement in named_children(body):
        if statement.type != "return_statement":
            continue
        values = named_children(statement)
        value = unwrap_parens(values[0]) if values else None
        if value is not None and value.type in MARKUP_NODE_TYPES:
            found = value
    return found


def tag_aliases(function: Node) -> Dict[str, str]:
    """Local ``const Comp = cond ? X : "tag"`` declarations resolved to ``tag``."""
    aliases: Dict[str, str] = {}
    body = field(function, "body")
    if body is None or body.type != "statement_block":
        return aliases
    for statement in named_children(body):
        if statement.type != "lexical_declaration":
            continue
        for declarator in named_children(statement):
            if declarator.type != "variable_declarator":
                continue
            name = node_text(field(declarator, "name"))
            value = unwrap_parens(field(declarator, "value"))
            if not name[:1].isupper() or value is None:
                continue
            if value.type == "string":
                aliases[name] = string_value(value) or name
            elif value.type == "ternary_expression":
                for branch in ("alternative", "consequence"):
                    literal = string_value(unwrap_parens(field(value, branch)))
                    if literal:
                        aliases[name] = literal
                        break
    return aliases


__all__ = [
    "MARKUP_NODE_TYPES",
    "is_markup",
    "is_event_attribute",
    "jsx_text_value",
    "JSXConverter",
    "returned_markup",
    "tag_aliases",
]
