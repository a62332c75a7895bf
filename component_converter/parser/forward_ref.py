"""Ref-forwarding wrapper analysis."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from ..ir.metadata import RefForwardConfig
from ..mappings.elements import GENERIC_ELEMENT_TYPE, normalize_element_type
from .source import call_name, field, named_children, node_text, unwrap_parens

FORWARD_REF_NAMES = frozenset({"forwardRef", "React.forwardRef"})
FUNCTION_NODE_TYPES = frozenset({"arrow_function", "function_expression", "function"})


def is_forward_ref_call(node: Optional[Node]) -> bool:
    node = unwrap_parens(node)
    return node is not None and node.type == "call_expression" and call_name(node) in FORWARD_REF_NAMES


def type_arguments(call: Node) -> List[Node]:
    args = field(call, "type_arguments")
    return named_children(args) if args is not None else []


def forward_ref_callback(call: Node) -> Optional[Node]:
    """The render function passed to ``forwardRef``."""
    arguments = field(call, "arguments")
    if arguments is None:
        return None
    for arg in named_children(arguments):
        arg = unwrap_parens(arg)
        if arg is not None and arg.type in FUNCTION_NODE_TYPES:
            return arg
    return None


def parameter_nodes(function: Node) -> List[Node]:
    """Formal parameters of an arrow function or function declaration."""
    params = field(function, "parameters")
    if params is not None:
        return named_children(params)
    single = field(function, "parameter")
    return [single] if single is not None else []


def parameter_pattern(param: Node) -> Node:
    """The binding pattern of a parameter, unwrapping type annotations."""
    if param.type in ("required_parameter", "optional_parameter"):
        pattern = field(param, "pattern")
        if pattern is not None:
            return pattern
    return param


def analyze_forward_ref(call: Node, warnings: List[str], component: str) -> RefForwardConfig:
    """
    Element type and ref parameter name of a ``forwardRef<T, P>(fn)`` call.

    ``T`` is normalized through the element-type table; a missing type
    argument falls back to ``HTMLElement`` with a warning. The ref name is the
    callback's second parameter, else ``ref``.
    """
    config = RefForwardConfig()
    types = type_arguments(call)
    if types:
        config.element_type = normalize_element_type(node_text(types[0]))
    else:
        warnings.append(f"{component}: forwardRef has no element type argument, using {GENERIC_ELEMENT_TYPE}")
        config.element_type = GENERIC_ELEMENT_TYPE
    callback = forward_ref_callback(call)
    if callback is not None:
        params = parameter_nodes(callback)
        if len(params) > 1:
            pattern = parameter_pattern(params[1])
            if pattern.type == "identifier":
                config.param_name = node_text(pattern)
    return config


def props_type_argument(call: Node) -> Optional[str]:
    types = type_arguments(call)
    if len(types) > 1:
        return node_text(types[1])
    return None


__all__ = [
    "FORWARD_REF_NAMES",
    "FUNCTION_NODE_TYPES",
    "is_forward_ref_call",
    "type_arguments",
    "forward_ref_callback",
    "parameter_nodes",
    "parameter_pattern",
    "analyze_forward_ref",
    "props_type_argument",
]
