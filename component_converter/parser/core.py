"""
Source to :class:`ParseResult`.

Parsing failures raise :class:`ConverterSyntaxError`. Everything after the
syntax tree exists degrades to warnings: a component without extractable
markup gets an empty root, a missing variant configuration leaves
``variant_name`` unset, and so on.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import ConverterOptions
from ..ir.metadata import (
    DEFAULT_STATE_PATTERNS,
    ComponentDefinition,
    ImportCategory,
    ParseResult,
    SharedMetadata,
    StatePropPattern,
)
from .components import (
    ComponentKind,
    DiscoveredComponent,
    discover_components,
    extract_base_classes,
    extract_state_and_effects,
)
from .cva import analyze_variant_configs, variant_name_for
from .forward_ref import analyze_forward_ref, props_type_argument
from .imports import analyze_imports, namespace_sources, uses_class_merge
from .jsx import JSXConverter, returned_markup, tag_aliases
from .props import analyze_props
from .source import SourceUnit

logger = logging.getLogger(__name__)


def _build_component(
    unit: SourceUnit,
    found: DiscoveredComponent,
    shared: SharedMetadata,
    options: ConverterOptions,
    warnings: List[str],
    patterns: Sequence[StatePropPattern],
) -> ComponentDefinition:
    if found.kind is ComponentKind.RE_EXPORT:
        return ComponentDefinition(
            name=found.name,
            is_re_export=True,
            re_export_target=found.re_export_target,
        )

    source_text = found.source_text
    definition = ComponentDefinition(name=found.name)
    definition.variant_name = variant_name_for(source_text, shared.variant_configs)
    config = shared.variant_configs.get(definition.variant_name) if definition.variant_name else None

    forward_props_type: Optional[str] = None
    if found.forward_ref_call is not None:
        definition.ref_forward = analyze_forward_ref(found.forward_ref_call, warnings, found.name)
        forward_props_type = props_type_argument(found.forward_ref_call)

    if found.function is not None:
        markup = returned_markup(found.function)
        if markup is not None:
            converter = JSXConverter(
                component=found.name,
                warnings=warnings,
                aliases=tag_aliases(found.function),
                normalize_primitives=options.normalize_primitives,
            )
            definition.root = converter.convert_root(markup)
        definition.state, definition.effects = extract_state_and_effects(found.function)
    if not definition.root:
        warnings.append(f"{found.name}: no markup found, output will use a synthesized root element")

    definition.props, pattern = analyze_props(
        unit,
        found.name,
        function=found.function,
        forward_props_type=forward_props_type,
        configs=shared.variant_configs,
        config=config,
        namespaces=namespace_sources(shared.imports),
        warnings=warnings,
        patterns=patterns,
    )
    definition.base_classes = extract_base_classes(source_text)
    if pattern is not None:
        logger.debug(f"{found.name}: state pattern {pattern.value_prop}/{pattern.change_prop}")
    return definition


def parse_source(
    text: str,
    options: Optional[ConverterOptions] = None,
    *,
    path: Optional[str] = None,
    patterns: Sequence[StatePropPattern] = DEFAULT_STATE_PATTERNS,
) -> ParseResult:
    """Parse one source unit into components, shared metadata and warnings."""
    options = options or ConverterOptions()
    if not text.strip():
        return ParseResult(primary=None, warnings=["Source is empty"])

    unit = SourceUnit(text, path=path)
    warnings: List[str] = []
    errors: List[str] = []

    shared = SharedMetadata()
    shared.variant_configs = analyze_variant_configs(unit, warnings)
    shared.imports = analyze_imports(unit)
    shared.uses_class_merge = uses_class_merge(unit, shared.imports)

    components: List[ComponentDefinition] = []
    for found in discover_components(unit):
        definition = _build_component(unit, found, shared, options, warnings, patterns)
        errors.extend(definition.validate(shared.variant_configs))
        components.append(definition)

    primary = next((c for c in components if not c.is_re_export), components[0] if components else None)
    if primary is None:
        warnings.append("No components found in source")

    primitive_sources = [info.source for info in shared.imports if info.category is ImportCategory.PRIMITIVE]
    if primitive_sources:
        warnings.append(
            f"Component uses wrapped primitives ({', '.join(primitive_sources)}); "
            "they are mapped to native elements in the output"
        )

    for warning in warnings:
        logger.warning(warning)
    return ParseResult(
        primary=primary,
        components=components,
        warnings=warnings,
        errors=errors,
        shared=shared,
    )


__all__ = ["parse_source"]
