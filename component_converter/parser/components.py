"""Component discovery and per-component body extraction."""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..mappings.primitives import is_primitive_namespace
from .forward_ref import FUNCTION_NODE_TYPES, forward_ref_callback, is_forward_ref_call
from .source import SourceUnit, call_name, field, named_children, node_text, unwrap_parens

logger = logging.getLogger(__name__)

STATE_HOOKS = frozenset({"useState", "React.useState"})
EFFECT_HOOKS = frozenset({"useEffect", "React.useEffect", "useLayoutEffect", "React.useLayoutEffect"})

_CN_FIRST_STRING = re.compile(r"cn\s*\(\s*[\"'`]([^\"'`]+)[\"'`]")
_CLASS_LITERAL = re.compile(r"className\s*=\s*[\"'`]([^\"'`]+)[\"'`]")


class ComponentKind(str, Enum):
    FORWARD_REF = "forward_ref"
    FUNCTION = "function"
    RE_EXPORT = "re_export"


@dataclass
class DiscoveredComponent:
    name: str
    kind: ComponentKind
    node: Node
    function: Optional[Node] = None
    forward_ref_call: Optional[Node] = None
    re_export_target: Optional[str] = None

    @property
    def source_text(self) -> str:
        return node_text(self.node)


def _is_component_name(name: str) -> bool:
    return name[:1].isupper()


def _is_primitive_alias(value: Node) -> bool:
    if value.type != "member_expression":
        return False
    obj = field(value, "object")
    return obj is not None and obj.type == "identifier" and is_primitive_namespace(node_text(obj))


def _from_declarator(declarator: Node) -> Optional[DiscoveredComponent]:
    name_node = field(declarator, "name")
    value = unwrap_parens(field(declarator, "value"))
    if name_node is None or name_node.type != "identifier" or value is None:
        return None
    name = node_text(name_node)
    if not _is_component_name(name):
        return None
    if is_forward_ref_call(value):
        return DiscoveredComponent(
            name=name,
            kind=ComponentKind.FORWARD_REF,
            node=declarator,
            function=forward_ref_callback(value),
            forward_ref_call=value,
        )
    if _is_primitive_alias(value):
        return DiscoveredComponent(
            name=name,
            kind=ComponentKind.RE_EXPORT,
            node=declarator,
            re_export_target=node_text(value),
        )
    if value.type in FUNCTION_NODE_TYPES:
        return DiscoveredComponent(name=name, kind=ComponentKind.FUNCTION, node=declarator, function=value)
    return None


def _top_level_declarations(unit: SourceUnit) -> Iterator[Node]:
    for node in unit.top_level():
        if node.type == "export_statement":
            declaration = field(node, "declaration")
            if declaration is not None:
                yield declaration
                continue
            for child in named_children(node):
                if child.type in ("function_declaration", "function_expression", "function"):
                    yield child
            continue
        yield node


def discover_components(unit: SourceUnit) -> List[DiscoveredComponent]:
    """Components declared at the top level, in source order."""
    found: List[DiscoveredComponent] = []
    for node in _top_level_declarations(unit):
        if node.type in ("lexical_declaration", "variable_declaration"):
            for declarator in named_children(node):
                if declarator.type != "variable_declarator":
                    continue
                component = _from_declarator(declarator)
                if component is not None:
                    found.append(component)
        elif node.type in ("function_declaration", "function_expression", "function"):
            name = node_text(field(node, "name"))
            if name and _is_component_name(name):
                found.append(
                    DiscoveredComponent(name=name, kind=ComponentKind.FUNCTION, node=node, function=node)
                )
    for component in found:
        logger.debug(f"Discovered {component.kind.value} component {component.name}")
    return found


def _block_statements(function: Optional[Node]) -> List[Node]:
    if function is None:
        return []
    body = field(function, "body")
    if body is None or body.type != "statement_block":
        return []
    return named_children(body)


def _call_args(call: Node) -> List[Node]:
    arguments = field(call, "arguments")
    return named_children(arguments) if arguments is not None else []


def _effect_body(callback: Node) -> str:
    body = field(callback, "body")
    if body is None:
        return ""
    text = node_text(body)
    if body.type == "statement_block":
        text = text[1:-1]
    return textwrap.dedent(text.strip("\n")).strip()


def extract_state_and_effects(function: Optional[Node]) -> Tuple[Dict[str, str], List[str]]:
    """``useState`` initial values by variable name and ``useEffect`` bodies."""
    state: Dict[str, str] = {}
    effects: List[str] = []
    for statement in _block_statements(function):
        if statement.type == "lexical_declaration":
            for declarator in named_children(statement):
                pattern = field(declarator, "name")
                value = unwrap_parens(field(declarator, "value"))
                if (
                    pattern is None
                    or pattern.type != "array_pattern"
                    or value is None
                    or value.type != "call_expression"
                    or call_name(value) not in STATE_HOOKS
                ):
                    continue
                names = [node_text(item) for item in named_children(pattern) if item.type == "identifier"]
                if not names:
                    continue
                args = _call_args(value)
                state[names[0]] = node_text(args[0]) if args else "undefined"
        elif statement.type == "expression_statement":
            call = unwrap_parens(named_children(statement)[0]) if named_children(statement) else None
            if call is None or call.type != "call_expression" or call_name(call) not in EFFECT_HOOKS:
                continue
            args = _call_args(call)
            if args and args[0].type in FUNCTION_NODE_TYPES:
                body = _effect_body(args[0])
                if body:
                    effects.append(body)
    return state, effects


def extract_base_classes(source_text: str) -> Optional[str]:
    """First string passed to ``cn(...)``, else the first literal ``className``."""
    match = _CN_FIRST_STRING.search(source_text) or _CLASS_LITERAL.search(source_text)
    return match.group(1) if match else None


__all__ = [
    "ComponentKind",
    "DiscoveredComponent",
    "discover_components",
    "extract_state_and_effects",
    "extract_base_classes",
]
