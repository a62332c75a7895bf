"""
Prop extraction.

Three tiers are tried in order until one yields props:

1. an ``interface`` or ``type`` named ``{Component}Props``
2. the destructured first parameter of the component function, followed by
   the wrapped primitive's own props when the forwardRef props type is
   ``ComponentPropsWithoutRef<typeof X.Y>``
3. any ``*Props`` declaration in the file

State props are then marked by the configured :class:`StatePropPattern`
detectors.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..ir.metadata import DEFAULT_STATE_PATTERNS, PropDefinition, StatePropPattern, VariantConfig
from ..mappings.primitive_props import PRIMITIVE_PACKAGE_PREFIX, primitive_props_for
from .forward_ref import parameter_nodes, parameter_pattern
from .source import SourceUnit, field, named_children, node_text, property_key, unwrap_parens

logger = logging.getLogger(__name__)

PROPS_SUFFIX = "Props"
CLASS_PROP_NAMES = frozenset({"className", "class"})
SKIPPED_DESTRUCTURED = frozenset({"children"})

_PRIMITIVE_PROPS_TYPE = re.compile(r"ComponentPropsWithoutRef\s*<\s*typeof\s+(\w+)\.(\w+)\s*>")
_VARIANT_PROPS_REF = re.compile(r"VariantProps\s*<\s*typeof\s+(\w+)\s*>")


# ============================================================================
# Variant helpers
# ============================================================================


def variant_prop(axis: str, config: VariantConfig) -> PropDefinition:
    return PropDefinition(
        name=axis,
        type=config.union_type(axis),
        optional=True,
        default_value=config.default_variants.get(axis),
        is_variant=True,
        allowed_values=config.allowed_values(axis),
    )


def _mark_variant(prop: PropDefinition, config: Optional[VariantConfig]) -> None:
    if config is None or prop.name not in config.variants:
        return
    prop.is_variant = True
    prop.allowed_values = config.allowed_values(prop.name)
    if prop.type == "unknown":
        prop.type = config.union_type(prop.name)
    if prop.default_value is None:
        prop.default_value = config.default_variants.get(prop.name)


def _add_variant_axes(
    props: List[PropDefinition],
    clause_text: str,
    configs: Dict[str, VariantConfig],
    fallback: Optional[VariantConfig],
) -> None:
    match = _VARIANT_PROPS_REF.search(clause_text)
    if match is None:
        return
    config = configs.get(match.group(1), fallback)
    if config is None:
        return
    existing = {prop.name for prop in props}
    for axis in config.axis_names:
        if axis not in existing:
            props.append(variant_prop(axis, config))


# ============================================================================
# Declared prop types
# ============================================================================


def _jsdoc(node: Node) -> Optional[str]:
    previous = node.prev_named_sibling
    if previous is None or previous.type != "comment":
        return None
    text = node_text(previous)
    if not text.startswith("/**"):
        return None
    lines = [line.strip().lstrip("*").strip() for line in text[3:-2].splitlines()]
    description = " ".join(line for line in lines if line and not line.startswith("@"))
    return description or None


def _property_signature(node: Node, config: Optional[VariantConfig]) -> Optional[PropDefinition]:
    name = property_key(field(node, "name"))
    if not name:
        return None
    annotation = field(node, "type")
    type_text = node_text(annotation).lstrip(":").strip() if annotation is not None else "unknown"
    prop = PropDefinition(
        name=name,
        type=type_text or "unknown",
        optional=any(child.type == "?" for child in node.children),
        description=_jsdoc(node),
    )
    _mark_variant(prop, config)
    return prop


def _members(body: Optional[Node], config: Optional[VariantConfig]) -> List[PropDefinition]:
    props: List[PropDefinition] = []
    if body is None:
        return props
    for member in named_children(body):
        if member.type == "property_signature":
            prop = _property_signature(member, config)
            if prop is not None:
                props.append(prop)
    return props


def props_from_interface(
    node: Node, configs: Dict[str, VariantConfig], config: Optional[VariantConfig]
) -> List[PropDefinition]:
    props = _members(field(node, "body"), config)
    for child in named_children(node):
        if child.type == "extends_type_clause":
            _add_variant_axes(props, node_text(child), configs, config)
    return props


def props_from_type_alias(
    node: Node, configs: Dict[str, VariantConfig], config: Optional[VariantConfig]
) -> List[PropDefinition]:
    value = field(node, "value")
    props: List[PropDefinition] = []
    if value is None:
        return props
    parts = named_children(value) if value.type == "intersection_type" else [value]
    for part in parts:
        part = unwrap_parens(part)
        if part is None:
            continue
        if part.type == "object_type":
            props.extend(_members(part, config))
        elif "VariantProps" in node_text(part):
            _add_variant_axes(props, node_text(part), configs, config)
    return props


def _props_declarations(unit: SourceUnit) -> Iterable[Node]:
    for node in unit.top_level():
        if node.type == "export_statement":
            declaration = field(node, "declaration")
            if declaration is not None:
                node = declaration
        if node.type in ("interface_declaration", "type_alias_declaration"):
            yield node


def _declaration_name(node: Node) -> str:
    return node_text(field(node, "name"))


def _props_from_declaration(
    node: Node, configs: Dict[str, VariantConfig], config: Optional[VariantConfig]
) -> List[PropDefinition]:
    if node.type == "interface_declaration":
        return props_from_interface(node, configs, config)
    return props_from_type_alias(node, configs, config)


# ============================================================================
# Destructured parameters
# ============================================================================


def _pair_default(entry: Node) -> Optional[str]:
    value = field(entry, "value")
    if value is not None and value.type == "assignment_pattern":
        return node_text(field(value, "right")) or None
    return None


def _pair_local(entry: Node) -> Optional[str]:
    """The local binding of ``{ title: heading = "x" }``, when it renames the prop."""
    value = field(entry, "value")
    if value is not None and value.type == "assignment_pattern":
        value = field(value, "left")
    if value is None or value.type != "identifier":
        return None
    local = node_text(value)
    return local if local != property_key(field(entry, "key")) else None


def destructured_aliases(pattern: Node) -> Dict[str, str]:
    """Prop name to local name for every renamed entry of a destructuring pattern."""
    aliases: Dict[str, str] = {}
    if pattern.type != "object_pattern":
        return aliases
    for entry in named_children(pattern):
        if entry.type != "pair_pattern":
            continue
        local = _pair_local(entry)
        if local:
            aliases[property_key(field(entry, "key"))] = local
    return aliases


def apply_inline_types(props: List[PropDefinition], param: Node, config: Optional[VariantConfig]) -> None:
    """
    Merge an inline annotation such as ``({ a, b }: { a: string; b?: number })``
    into props found by destructuring.
    """
    annotation = field(param, "type") if param.type in ("required_parameter", "optional_parameter") else None
    if annotation is None:
        return
    declared: Dict[str, PropDefinition] = {}
    for node in named_children(annotation):
        node = unwrap_parens(node)
        if node is None:
            continue
        parts = named_children(node) if node.type == "intersection_type" else [node]
        for part in parts:
            if part.type == "object_type":
                declared.update((member.name, member) for member in _members(part, config))
    for prop in props:
        member = declared.get(prop.name)
        if member is None:
            continue
        if member.type != "unknown":
            prop.type = member.type
        prop.optional = member.optional or prop.default_value is not None
        prop.description = prop.description or member.description


def props_from_pattern(pattern: Node, config: Optional[VariantConfig]) -> List[PropDefinition]:
    """Props bound by an object destructuring pattern."""
    props: List[PropDefinition] = []
    if pattern.type != "object_pattern":
        return props
    for entry in named_children(pattern):
        name: Optional[str] = None
        default: Optional[str] = None
        local: Optional[str] = None
        if entry.type == "rest_pattern":
            continue
        if entry.type == "shorthand_property_identifier_pattern":
            name = node_text(entry)
        elif entry.type == "object_assignment_pattern":
            name = node_text(field(entry, "left")) or None
            default = node_text(field(entry, "right")) or None
        elif entry.type == "pair_pattern":
            name = property_key(field(entry, "key"))
            default = _pair_default(entry)
            local = _pair_local(entry)
        if not name or name in SKIPPED_DESTRUCTURED:
            continue
        prop = PropDefinition(name=name, default_value=default, local_name=local)
        if name in CLASS_PROP_NAMES:
            prop.type = "string"
        _mark_variant(prop, config)
        props.append(prop)
    return props


# ============================================================================
# Wrapped primitive props
# ============================================================================


def _kebab(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def resolve_primitive_package(alias: str, namespaces: Dict[str, str]) -> Optional[str]:
    """Package imported as ``alias``, else the package named after it."""
    if alias in namespaces:
        return namespaces[alias]
    short = re.sub(r"Primitives?$", "", alias)
    candidate = f"{PRIMITIVE_PACKAGE_PREFIX}react-{_kebab(short)}"
    if candidate in namespaces.values():
        return candidate
    return None


def add_primitive_props(
    props: List[PropDefinition],
    props_type: Optional[str],
    namespaces: Dict[str, str],
    warnings: List[str],
    component: str,
) -> None:
    if not props_type:
        return
    match = _PRIMITIVE_PROPS_TYPE.search(props_type)
    if match is None:
        return
    alias, member = match.groups()
    package = resolve_primitive_package(alias, namespaces)
    table_props = primitive_props_for(package, member) if package else None
    if table_props is None:
        warnings.append(f"{component}: no prop table for {alias}.{member}")
        return
    existing = {prop.name for prop in props}
    for entry in table_props:
        if entry.name == "asChild" or entry.name in existing:
            continue
        props.append(
            PropDefinition(
                name=entry.name,
                type=entry.type,
                optional=entry.optional,
                default_value=entry.default_value,
            )
        )


# ============================================================================
# State props
# ============================================================================


def detect_state_props(
    props: List[PropDefinition],
    patterns: Sequence[StatePropPattern] = DEFAULT_STATE_PATTERNS,
) -> Optional[StatePropPattern]:
    """Mark the value prop of the first matching pattern and return the pattern."""
    for pattern in patterns:
        if not pattern.matches(props):
            continue
        for prop in props:
            if prop.name == pattern.value_prop:
                prop.is_state_prop = True
                prop.data_state_values = pattern.labels
                if prop.type == "unknown":
                    prop.type = "boolean"
            elif prop.name == pattern.change_prop and prop.type == "unknown":
                prop.type = f"({pattern.value_prop}: boolean) => void"
        return pattern
    return None


# ============================================================================
# Entry point
# ============================================================================


def analyze_props(
    unit: SourceUnit,
    component: str,
    *,
    function: Optional[Node],
    forward_props_type: Optional[str],
    configs: Dict[str, VariantConfig],
    config: Optional[VariantConfig],
    namespaces: Dict[str, str],
    warnings: List[str],
    patterns: Sequence[StatePropPattern] = DEFAULT_STATE_PATTERNS,
) -> Tuple[List[PropDefinition], Optional[StatePropPattern]]:
    """Props of ``component`` and the state pattern they match, if any."""
    props: List[PropDefinition] = []
    declarations = list(_props_declarations(unit))
    own = [node for node in declarations if _declaration_name(node) == f"{component}{PROPS_SUFFIX}"]
    if own:
        props = _props_from_declaration(own[0], configs, config)
        logger.debug(f"{component}: props from {component}{PROPS_SUFFIX}")

    params = parameter_nodes(function) if function is not None else []
    if not props and function is not None:
        if params:
            props = props_from_pattern(parameter_pattern(params[0]), config)
            apply_inline_types(props, params[0], config)
        add_primitive_props(props, forward_props_type, namespaces, warnings, component)
        if props:
            logger.debug(f"{component}: props from destructured parameters")

    if not props:
        for node in declarations:
            if _declaration_name(node).endswith(PROPS_SUFFIX):
                props = _props_from_declaration(node, configs, config)
                if props:
                    logger.debug(f"{component}: props from {_declaration_name(node)}")
                    break

    if params:
        # Declared props still pick up the local names they are destructured to.
        aliases = destructured_aliases(parameter_pattern(params[0]))
        for prop in props:
            if prop.local_name is None and prop.name in aliases:
                prop.local_name = aliases[prop.name]

    if not props:
        warnings.append(f"{component}: no props found")
    pattern = detect_state_props(props, patterns)
    return props, pattern


__all__ = [
    "PROPS_SUFFIX",
    "variant_prop",
    "props_from_interface",
    "props_from_type_alias",
    "props_from_pattern",
    "destructured_aliases",
    "apply_inline_types",
    "resolve_primitive_package",
    "add_primitive_props",
    "detect_state_props",
    "analyze_props",
]
