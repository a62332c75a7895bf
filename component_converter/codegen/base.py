"""
Target-independent code generation pieces.

Both generators build the same structured declaration list and ask the same
:class:`MarkupPlanner` which attributes an element gains. Only spelling is
left to the target modules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from ..config import ConverterOptions, Target
from ..ir.metadata import ComponentDefinition, ComponentMetadata, ImportCategory, ImportInfo, PropDefinition
from ..ir.nodes import (
    CLASS_KEY,
    NO_SLOT_ELEMENTS,
    REF_KEY,
    SPREAD_KEY,
    Binding,
    BindingKind,
    Element,
    IRNode,
    Text,
    find_root_element,
    is_void_tag,
)
from ..mappings.elements import ELEMENT_TYPE_TO_TAG, GENERIC_ELEMENT_TYPE, tag_for_element_type
from ..mappings.icons import icon_package_for
from ..mappings.primitives import native_tag_for
from .classes import fallback_class_expression

STATE_SELECTOR_MARKER = "data-[state="
DATA_STATE_ATTRIBUTE = "data-state"
DATA_STATE_NAME = "dataState"
TOGGLE_HANDLER = "toggle"
CLASS_PROP_NAMES = frozenset({"className", "class"})
SPECIAL_PROP_NAMES = frozenset({"children", "ref", "asChild"})

# Names the generators import themselves.
GENERATED_IMPORT_NAMES = frozenset({"cn", "cva", "VariantProps"})

ATTRIBUTE_NAME_MAP: Dict[str, str] = {
    "className": "class",
    "htmlFor": "for",
    "tabIndex": "tabindex",
    "autoFocus": "autofocus",
    "autoComplete": "autocomplete",
    "readOnly": "readonly",
    "maxLength": "maxlength",
}

_LITERAL_KEYWORDS = frozenset({"true", "false", "null", "undefined"})
_NUMBER = re.compile(r"^-?\d")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$-]*$")


class DeclarationKind(str, Enum):
    IMPORT = "import"
    VARIANT = "variant"
    PROP_TYPE = "prop_type"
    PROP_BINDING = "prop_binding"
    EMITS = "emits"
    DERIVED = "derived"
    REF = "ref"
    STATE = "state"
    EFFECT = "effect"
    HANDLER = "handler"


DECLARATION_ORDER = list(DeclarationKind)


@dataclass
class PropBinding:
    """One entry of the generated prop binding, in declaration order."""

    name: str
    local: Optional[str] = None
    default: Optional[str] = None
    type: str = "unknown"
    bindable: bool = False
    rest: bool = False

    @property
    def local_name(self) -> str:
        return self.local or self.name


@dataclass
class Declaration:
    """
    A declaration in structured form.

    ``code`` holds text that is the same in every serialization (imports,
    the variant definition, the prop type, handler bodies). ``value`` holds
    the expression of derived, state and effect declarations. ``bindings``
    is only used by prop bindings.
    """

    kind: DeclarationKind
    name: str = ""
    code: str = ""
    value: str = ""
    type: Optional[str] = None
    bindings: List[PropBinding] = field(default_factory=list)


@dataclass
class GeneratedComponent:
    name: str
    target: Target
    declarations: List[Declaration]
    declaration_block: str
    markup_block: str
    filename: str
    used_fallback: bool = False

    def assemble(self) -> str:
        return f"{self.declaration_block.rstrip()}\n\n{self.markup_block.rstrip()}\n"


class AttributeKind(str, Enum):
    STATIC = "static"
    EXPRESSION = "expression"
    EVENT = "event"


@dataclass
class PlannedAttribute:
    name: str
    value: str
    kind: AttributeKind = AttributeKind.EXPRESSION


def sort_declarations(declarations: List[Declaration]) -> List[Declaration]:
    """Stable sort into the fixed declaration order."""
    return sorted(declarations, key=lambda decl: DECLARATION_ORDER.index(decl.kind))


def format_default(value: Optional[str], quote: str = '"') -> Optional[str]:
    """
    Normalize an opaque default for emission.

    Quoted strings are re-quoted with ``quote``; keywords, numbers, and
    object, array or function literals pass through; bare words are quoted.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        inner = text[1:-1]
        if text[0] == "`":
            return text
        return f"{quote}{inner}{quote}"
    if text in _LITERAL_KEYWORDS or _NUMBER.match(text):
        return text
    if text[0] in "[{(" or "=>" in text:
        return text
    return f"{quote}{text}{quote}"


def attribute_name(name: str) -> str:
    return ATTRIBUTE_NAME_MAP.get(name, name)


def resolve_metadata(component: ComponentDefinition) -> ComponentMetadata:
    """The consolidated metadata, or a component-only view when none was attached."""
    if component.metadata is not None:
        return component.metadata
    return ComponentMetadata.from_component(component)


def carried_imports(metadata: ComponentMetadata, target: Target) -> List[ImportInfo]:
    """
    Source imports that survive into the output.

    React, primitive and utility imports are dropped; generator-owned names
    are removed; icon packages are remapped for the target.
    """
    kept: List[ImportInfo] = []
    for info in metadata.imports:
        if info.category in (ImportCategory.REACT, ImportCategory.PRIMITIVE, ImportCategory.UTILITY):
            continue
        names = [name for name in info.named_imports if name not in GENERATED_IMPORT_NAMES]
        if info.named_imports and not names and not info.default_import and not info.namespace_import:
            continue
        source = info.source
        if info.category is ImportCategory.ICON:
            source = icon_package_for(info.source, target.value) or info.source
        kept.append(
            ImportInfo(
                source=source,
                named_imports=names,
                default_import=info.default_import,
                namespace_import=info.namespace_import,
                is_type_only=info.is_type_only,
                category=info.category,
            )
        )
    return kept


def render_import(info: ImportInfo, quote: str, semicolon: bool = True) -> str:
    parts: List[str] = []
    if info.default_import:
        parts.append(info.default_import)
    if info.namespace_import:
        parts.append(f"* as {info.namespace_import}")
    if info.named_imports:
        parts.append("{ " + ", ".join(info.named_imports) + " }")
    keyword = "import type" if info.is_type_only else "import"
    end = ";" if semicolon else ""
    if not parts:
        return f"import {quote}{info.source}{quote}{end}"
    return f"{keyword} {', '.join(parts)} from {quote}{info.source}{quote}{end}"


def variant_definition(metadata: ComponentMetadata, quote: str) -> Optional[str]:
    """The ``const name = cva(...)`` text for the component's variant config."""
    config = metadata.variant
    if config is None:
        return None
    base_quote = "`" if "${" in config.base_classes else quote
    lines = [f"const {config.name} = cva(", f"  {base_quote}{config.base_classes}{base_quote},", "  {", "    variants: {"]
    for axis, values in config.variants.items():
        lines.append(f"      {axis}: {{")
        for value, classes in values.items():
            key = value if _IDENTIFIER.match(value) and "-" not in value else f"{quote}{value}{quote}"
            lines.append(f"        {key}: {quote}{classes}{quote},")
        lines.append("      },")
    lines.append("    },")
    if config.compound_variants:
        lines.append("    compoundVariants: [")
        for compound in config.compound_variants:
            entries = []
            for key, condition in compound.conditions.items():
                if isinstance(condition, list):
                    rendered = "[" + ", ".join(f"{quote}{c}{quote}" for c in condition) + "]"
                else:
                    rendered = f"{quote}{condition}{quote}"
                entries.append(f"{key}: {rendered}")
            entries.append(f"class: {quote}{compound.classes}{quote}")
            lines.append("      { " + ", ".join(entries) + " },")
        lines.append("    ],")
    lines.append("    defaultVariants: {")
    for axis, value in config.default_variants.items():
        lines.append(f"      {axis}: {quote}{value}{quote},")
    lines.append("    },")
    lines.append("  }")
    lines.append(");")
    return "\n".join(lines)


def change_prop_event(name: str) -> Optional[str]:
    """``onCheckedChange`` to ``checked``; ``onValueChange`` to ``modelValue``."""
    match = re.match(r"^on([A-Z]\w*)Change$", name)
    if match is None:
        return None
    subject = match.group(1)
    if subject == "Value":
        return "modelValue"
    return subject[0].lower() + subject[1:]


def native_tag(element: Element) -> str:
    """The tag an element renders as, resolving primitives that were kept dotted."""
    if element.is_wrapped_primitive:
        return native_tag_for(element.tag) or element.tag
    return element.tag


def render_children(
    children: Sequence[IRNode],
    render: Callable[[IRNode, int], List[str]],
    depth: int,
    indent: str,
) -> List[str]:
    """
    Render child nodes one per line, except that adjacent text and
    interpolations are concatenated onto a single line. Splitting them would
    add whitespace the JSX source never had.
    """
    lines: List[str] = []
    run: List[str] = []

    def flush() -> None:
        text = "".join(run).strip()
        if text:
            lines.append(f"{indent * depth}{text}")
        run.clear()

    for child in children:
        if isinstance(child, Text):
            run.extend(render(child, 0))
            continue
        flush()
        lines.extend(render(child, depth))
    flush()
    return lines


class MarkupPlanner:
    """
    Decides which attributes generated elements gain.

    The root element of a stateful component receives, in order and only
    when missing: ``type="button"`` (button roots), the pattern role, the ARIA
    state attribute, ``data-state``, ``disabled`` and the toggle click
    handler. Other elements only receive ``data-state``, and only when their
    class mentions a state selector.
    """

    def __init__(self, component: ComponentDefinition, metadata: ComponentMetadata) -> None:
        self.component = component
        self.metadata = metadata
        self.pattern = metadata.state_pattern

    @property
    def is_stateful(self) -> bool:
        return self.pattern is not None

    @property
    def has_toggle(self) -> bool:
        return self.pattern is not None and self.pattern.matches(self.component.props)

    @property
    def has_disabled(self) -> bool:
        return self.component.has_prop("disabled")

    @staticmethod
    def _present(element: Element, name: str, planned: List[PlannedAttribute]) -> bool:
        if name in element.static_attributes or name in element.bindings:
            return True
        return any(attr.name == name for attr in planned)

    def root_attributes(self, element: Element, prop_ref) -> List[PlannedAttribute]:
        """``prop_ref(name)`` spells a prop reference for the target."""
        planned: List[PlannedAttribute] = []
        if self.pattern is None:
            return planned

        def add(attr: PlannedAttribute) -> None:
            if not self._present(element, attr.name, planned):
                planned.append(attr)

        if native_tag(element) == "button":
            add(PlannedAttribute("type", "button", AttributeKind.STATIC))
            if self.pattern.role:
                add(PlannedAttribute("role", self.pattern.role, AttributeKind.STATIC))
        add(PlannedAttribute(self.pattern.aria_attribute, prop_ref(self.pattern.value_prop)))
        add(PlannedAttribute(DATA_STATE_ATTRIBUTE, DATA_STATE_NAME))
        if self.has_disabled:
            add(PlannedAttribute("disabled", prop_ref("disabled")))
        if self.has_toggle:
            add(PlannedAttribute("onClick", TOGGLE_HANDLER, AttributeKind.EVENT))
        return planned

    def child_attributes(self, element: Element) -> List[PlannedAttribute]:
        if self.pattern is None:
            return []
        if STATE_SELECTOR_MARKER not in element.class_source():
            return []
        if self._present(element, DATA_STATE_ATTRIBUTE, []):
            return []
        return [PlannedAttribute(DATA_STATE_ATTRIBUTE, DATA_STATE_NAME)]

    def attributes_for(self, element: Element, is_root: bool, prop_ref) -> List[PlannedAttribute]:
        if is_root:
            return self.root_attributes(element, prop_ref)
        return self.child_attributes(element)

    @staticmethod
    def needs_placeholder(element: Element) -> bool:
        """Childless, spread-forwarding elements render caller children."""
        if is_void_tag(element.tag) or element.tag in NO_SLOT_ELEMENTS:
            return False
        return not element.children and element.has_spread

    @staticmethod
    def self_closing(element: Element) -> bool:
        return is_void_tag(element.tag) or (element.tag in NO_SLOT_ELEMENTS and not element.children)


def local_name(component: ComponentDefinition, name: str) -> str:
    """The variable a prop is bound to inside the component body."""
    prop = component.find_prop(name)
    if prop is not None and prop.local_name:
        return prop.local_name
    return name


def class_prop(component: ComponentDefinition) -> Optional[PropDefinition]:
    for name in CLASS_PROP_NAMES:
        prop = component.find_prop(name)
        if prop is not None:
            return prop
    return None


def declares_class(component: ComponentDefinition, metadata: ComponentMetadata) -> bool:
    return (
        class_prop(component) is not None
        or bool(metadata.base_classes)
        or metadata.variant is not None
    )


def output_filename(component: ComponentDefinition, options: ConverterOptions) -> str:
    return f"{component.name}.{options.target.extension}"


def is_change_prop(name: str) -> bool:
    return change_prop_event(name) is not None


def prop_default(prop: PropDefinition, metadata: ComponentMetadata) -> Optional[str]:
    """The declared default, else the variant default for variant axes."""
    if prop.default_value is not None:
        return prop.default_value
    config = metadata.variant
    if config is not None and prop.name in config.default_variants:
        return f"\"{config.default_variants[prop.name]}\""
    return None


def planned_props(props: List[PropDefinition], metadata: ComponentMetadata) -> List[PropDefinition]:
    """
    Props the generated binding declares, in source order.

    The class prop, ``children`` and ``ref`` are handled by the generators
    themselves. Variant axes the source never destructured are appended.
    """
    planned = [prop for prop in props if prop.name not in CLASS_PROP_NAMES | SPECIAL_PROP_NAMES]
    config = metadata.variant
    if config is not None:
        known = {prop.name for prop in planned}
        for axis in config.axis_names:
            if axis not in known:
                planned.append(
                    PropDefinition(
                        name=axis,
                        type=config.union_type(axis),
                        is_variant=True,
                        allowed_values=config.allowed_values(axis),
                    )
                )
    return planned


def root_element_type(component: ComponentDefinition, metadata: ComponentMetadata) -> str:
    if metadata.ref_forward is not None:
        return metadata.ref_forward.element_type
    root = find_root_element(component.root)
    if root is not None:
        for element_type, tag in ELEMENT_TYPE_TO_TAG.items():
            if tag == root.tag:
                return element_type
    return GENERIC_ELEMENT_TYPE


def forwards_ref(component: ComponentDefinition, metadata: ComponentMetadata) -> bool:
    return metadata.ref_forward is not None and not component.has_prop(REF_KEY)


def fallback_root(component: ComponentDefinition, metadata: ComponentMetadata) -> Element:
    """
    Synthesize the root element of a component without extracted markup.

    The tag comes from the forwarded element type (``div`` by default). The
    element carries the class expression, the ref binding and the spread, so
    the planner and the generators treat it exactly like parsed markup.
    """
    tag = tag_for_element_type(metadata.ref_forward.element_type if metadata.ref_forward else None)
    element = Element(tag=tag, source_tag=None)
    if declares_class(component, metadata):
        element.bindings[CLASS_KEY] = Binding(fallback_class_expression(metadata))
    if metadata.ref_forward is not None:
        element.bindings[REF_KEY] = Binding(metadata.ref_forward.param_name)
    element.bindings[SPREAD_KEY] = Binding("props", BindingKind.SPREAD)
    return element


__all__ = [
    "STATE_SELECTOR_MARKER",
    "DATA_STATE_ATTRIBUTE",
    "DATA_STATE_NAME",
    "TOGGLE_HANDLER",
    "DeclarationKind",
    "PropBinding",
    "Declaration",
    "GeneratedComponent",
    "AttributeKind",
    "PlannedAttribute",
    "MarkupPlanner",
    "native_tag",
    "render_children",
    "sort_declarations",
    "format_default",
    "attribute_name",
    "resolve_metadata",
    "carried_imports",
    "render_import",
    "variant_definition",
    "change_prop_event",
    "class_prop",
    "local_name",
    "declares_class",
    "output_filename",
    "is_change_prop",
    "prop_default",
    "planned_props",
    "root_element_type",
    "forwards_ref",
    "fallback_root",
]
