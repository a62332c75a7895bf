"""Variant-class configuration extraction from ``cva(...)`` calls."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from tree_sitter import Node

from ..ir.metadata import CompoundVariant, VariantConfig
from .imports import VARIANT_BUILDER_NAME
from .source import SourceUnit, call_name, field, named_children, node_text, property_key, string_value, walk_nodes

logger = logging.getLogger(__name__)


def _literal_text(node: Optional[Node]) -> str:
    """String contents for literals, raw source text otherwise."""
    value = string_value(node)
    if value is not None:
        return value
    return node_text(node)


def _object_pairs(node: Optional[Node]) -> List[Node]:
    if node is None or node.type != "object":
        return []
    return [child for child in named_children(node) if child.type == "pair"]


def _find_pair(node: Optional[Node], key: str) -> Optional[Node]:
    for pair in _object_pairs(node):
        if property_key(field(pair, "key")) == key:
            return field(pair, "value")
    return None


def _parse_variants(node: Optional[Node], name: str, warnings: List[str]) -> Dict[str, Dict[str, str]]:
    variants: Dict[str, Dict[str, str]] = {}
    if node is None:
        return variants
    if node.type != "object":
        warnings.append(f"Variant configuration '{name}': 'variants' is not an object literal")
        return variants
    for pair in _object_pairs(node):
        axis = property_key(field(pair, "key"))
        values_node = field(pair, "value")
        if not axis:
            continue
        if values_node is None or values_node.type != "object":
            warnings.append(f"Variant configuration '{name}': axis '{axis}' is not an object literal")
            continue
        values: Dict[str, str] = {}
        for value_pair in _object_pairs(values_node):
            value_name = property_key(field(value_pair, "key"))
            if value_name is None:
                continue
            values[value_name] = _literal_text(field(value_pair, "value"))
        if values:
            variants[axis] = values
    return variants


def _parse_defaults(node: Optional[Node]) -> Dict[str, str]:
    defaults: Dict[str, str] = {}
    for pair in _object_pairs(node):
        key = property_key(field(pair, "key"))
        if key:
            defaults[key] = _literal_text(field(pair, "value"))
    return defaults


def _parse_compounds(node: Optional[Node]) -> List[CompoundVariant]:
    compounds: List[CompoundVariant] = []
    if node is None or node.type != "array":
        return compounds
    for element in named_children(node):
        if element.type != "object":
            continue
        compound = CompoundVariant()
        for pair in _object_pairs(element):
            key = property_key(field(pair, "key"))
            value = field(pair, "value")
            if key in ("class", "className"):
                compound.classes = _literal_text(value)
            elif key and value is not None and value.type == "array":
                compound.conditions[key] = [_literal_text(item) for item in named_children(value)]
            elif key:
                compound.conditions[key] = _literal_text(value)
        if compound.conditions and compound.classes:
            compounds.append(compound)
    return compounds


def _declared_name(call: Node) -> Optional[str]:
    parent = call.parent
    while parent is not None and parent.type in ("parenthesized_expression", "as_expression"):
        parent = parent.parent
    if parent is not None and parent.type == "variable_declarator":
        return node_text(field(parent, "name"))
    return None


def parse_variant_call(call: Node, name: str, warnings: List[str]) -> Optional[VariantConfig]:
    """Build a :class:`VariantConfig` from one ``cva(base, config)`` call node."""
    arguments = field(call, "arguments")
    args = named_children(arguments) if arguments is not None else []
    if not args:
        warnings.append(f"Variant configuration '{name}' has no arguments")
        return None
    base = args[0]
    if base.type == "string" or base.type == "template_string":
        base_classes = string_value(base) or ""
    else:
        warnings.append(f"Variant configuration '{name}': base classes are not a string literal")
        base_classes = node_text(base)
    options = args[1] if len(args) > 1 else None
    if options is not None and options.type != "object":
        warnings.append(f"Variant configuration '{name}': options are not an object literal")
        options = None

    variants = _parse_variants(_find_pair(options, "variants"), name, warnings)
    defaults = _parse_defaults(_find_pair(options, "defaultVariants"))
    unknown = [key for key in defaults if key not in variants]
    for key in unknown:
        warnings.append(
            f"Variant configuration '{name}': default for unknown variant '{key}' ignored"
        )
        del defaults[key]
    compounds = _parse_compounds(_find_pair(options, "compoundVariants"))
    return VariantConfig(
        name=name,
        base_classes=base_classes,
        variants=variants,
        default_variants=defaults,
        compound_variants=compounds,
    )


def analyze_variant_configs(unit: SourceUnit, warnings: List[str]) -> Dict[str, VariantConfig]:
    """Every variant configuration in the unit, keyed by its declared name."""
    configs: Dict[str, VariantConfig] = {}
    for node in walk_nodes(unit.root):
        if node.type != "call_expression" or call_name(node) != VARIANT_BUILDER_NAME:
            continue
        name = _declared_name(node) or f"variants_{len(configs)}"
        config = parse_variant_call(node, name, warnings)
        if config is not None:
            configs[name] = config
            logger.debug(f"Found variant configuration {name} with axes {config.axis_names}")
    return configs


def variant_name_for(component_source: str, configs: Dict[str, VariantConfig]) -> Optional[str]:
    """The first configuration whose ``name(`` call appears in the component text."""
    for name in configs:
        if f"{name}(" in component_source:
            return name
    return None


__all__ = ["parse_variant_call", "analyze_variant_configs", "variant_name_for"]
