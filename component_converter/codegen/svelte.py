"""
Svelte generator.

Declarations are built once in structured form and serialized either with
runes (Svelte 5) or in the legacy ``export let`` style (Svelte 4). The
``svelte5-runes`` plugin reuses :func:`serialize_script` to re-emit a legacy
declaration list in rune form.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..config import ConverterOptions, Target
from ..ir.metadata import ComponentDefinition, ComponentMetadata, PropDefinition
from ..ir.nodes import (
    CLASS_KEY,
    REF_KEY,
    SPREAD_KEY,
    BindingKind,
    ConditionalShow,
    Element,
    Fragment,
    IRNode,
    Slot,
    Text,
    find_root_element,
    unhandled_node,
)
from ..mappings.elements import svelte_attributes_import, svelte_attributes_type
from .base import (
    DATA_STATE_NAME,
    TOGGLE_HANDLER,
    AttributeKind,
    Declaration,
    DeclarationKind,
    GeneratedComponent,
    MarkupPlanner,
    PlannedAttribute,
    PropBinding,
    attribute_name,
    carried_imports,
    declares_class,
    fallback_root,
    format_default,
    forwards_ref,
    local_name,
    output_filename,
    planned_props,
    prop_default,
    render_children,
    render_import,
    resolve_metadata,
    root_element_type,
    sort_declarations,
    variant_definition,
)
from .classes import strip_props_access, translate_class_expression, uses_class_merge_call

logger = logging.getLogger(__name__)

QUOTE = '"'
INDENT = "  "
RUNES_PLACEHOLDER = "{@render children?.()}"
LEGACY_PLACEHOLDER = "<slot />"
REST_PROPS = "restProps"
LEGACY_REST_PROPS = "$$restProps"
ATTRIBUTES_MODULE = "svelte/elements"

_EVENT_NAME = re.compile(r"^on([A-Z]\w*)$")


# =============================================================================
# Script serialization
# =============================================================================


def _serialize_prop_type(declaration: Declaration, runes: bool) -> str:
    name = "Props" if runes else "$$Props"
    header = f"interface {name}"
    if declaration.value:
        header += f" extends {declaration.value}"
    if not declaration.code:
        return f"{header} {{}}"
    return f"{header} {{\n{declaration.code}\n}}"


def _serialize_runes_bindings(declaration: Declaration, typescript: bool) -> str:
    entries: List[str] = []
    for binding in declaration.bindings:
        if binding.rest:
            entries.append(f"...{binding.local_name}")
            continue
        entry = binding.name if binding.local_name == binding.name else f"{binding.name}: {binding.local_name}"
        if binding.bindable:
            entry += f" = $bindable({binding.default or ''})"
        elif binding.default is not None:
            entry += f" = {binding.default}"
        entries.append(entry)
    annotation = ": Props" if typescript else ""
    body = ",\n".join(f"{INDENT}{entry}" for entry in entries)
    return f"let {{\n{body}\n}}{annotation} = $props();"


def _serialize_legacy_bindings(declaration: Declaration, typescript: bool) -> str:
    lines: List[str] = []
    for binding in declaration.bindings:
        if binding.rest or binding.name == "children":
            continue
        annotation = ""
        if typescript:
            annotation = f": $$Props[\"{binding.name}\"]"
        default = binding.default if binding.default is not None else "undefined"
        if binding.local_name != binding.name:
            lines.append(f"let {binding.local_name}{annotation} = {default};")
            lines.append(f"export {{ {binding.local_name} as {binding.name} }};")
        else:
            lines.append(f"export let {binding.name}{annotation} = {default};")
    return "\n".join(lines)


def _serialize(declaration: Declaration, runes: bool, typescript: bool) -> str:
    kind = declaration.kind
    if kind is DeclarationKind.PROP_TYPE:
        return _serialize_prop_type(declaration, runes)
    if kind is DeclarationKind.PROP_BINDING:
        if runes:
            return _serialize_runes_bindings(declaration, typescript)
        return _serialize_legacy_bindings(declaration, typescript)
    if kind is DeclarationKind.DERIVED:
        if runes:
            return f"const {declaration.name} = $derived({declaration.value});"
        return f"$: {declaration.name} = {declaration.value};"
    if kind is DeclarationKind.STATE:
        if runes:
            return f"let {declaration.name} = $state({declaration.value});"
        return f"let {declaration.name} = {declaration.value};"
    if kind is DeclarationKind.EFFECT:
        body = "\n".join(f"{INDENT}{line}" if line else "" for line in declaration.value.splitlines())
        hook = "$effect" if runes else "onMount"
        return f"{hook}(() => {{\n{body}\n}});"
    return declaration.code


def serialize_script(declarations: List[Declaration], *, runes: bool, typescript: bool) -> str:
    """
    Render the ``<script>`` block for ``declarations``.

    Imports are grouped; every other declaration is separated by a blank
    line. Legacy output imports ``onMount`` when effects are present.
    """
    ordered = sort_declarations(declarations)
    imports = [decl.code for decl in ordered if decl.kind is DeclarationKind.IMPORT]
    if not runes and any(decl.kind is DeclarationKind.EFFECT for decl in ordered):
        imports.insert(0, 'import { onMount } from "svelte";')
    sections: List[str] = []
    if imports:
        sections.append("\n".join(imports))
    for declaration in ordered:
        if declaration.kind is DeclarationKind.IMPORT:
            continue
        if declaration.kind is DeclarationKind.PROP_TYPE and not typescript:
            continue
        text = _serialize(declaration, runes, typescript)
        if text:
            sections.append(text)
    body = "\n\n".join(sections)
    indented = "\n".join(f"{INDENT}{line}" if line else "" for line in body.splitlines())
    opening = '<script lang="ts">' if typescript else "<script>"
    return f"{opening}\n{indented}\n</script>"


# =============================================================================
# Generator
# =============================================================================


class SvelteGenerator:
    """Emit a Svelte component from a parsed component definition."""

    target = Target.SVELTE

    def generate(
        self,
        component: ComponentDefinition,
        props: List[PropDefinition],
        options: ConverterOptions,
    ) -> GeneratedComponent:
        metadata = resolve_metadata(component)
        runes = options.svelte.runes
        renderer = _MarkupRenderer(component, metadata, runes)

        used_fallback = not component.root
        nodes: List[IRNode] = list(component.root)
        if used_fallback:
            logger.debug(f"{component.name}: synthesizing root element")
            nodes = [fallback_root(component, metadata)]
        markup = renderer.render(nodes)

        declarations = self._declarations(component, props, metadata, options, renderer.uses_class_merge)
        script = serialize_script(declarations, runes=runes, typescript=options.typescript)
        return GeneratedComponent(
            name=component.name,
            target=self.target,
            declarations=declarations,
            declaration_block=script,
            markup_block=markup,
            filename=output_filename(component, options),
            used_fallback=used_fallback,
        )

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _declarations(
        self,
        component: ComponentDefinition,
        props: List[PropDefinition],
        metadata: ComponentMetadata,
        options: ConverterOptions,
        uses_class_merge: bool,
    ) -> List[Declaration]:
        declarations: List[Declaration] = []
        element_type = root_element_type(component, metadata)
        variant = metadata.variant

        def add_import(code: str) -> None:
            declarations.append(Declaration(DeclarationKind.IMPORT, code=code))

        if uses_class_merge:
            add_import(f'import {{ cn }} from "{options.class_merge_path}";')
        if variant is not None:
            if options.typescript:
                add_import('import { cva, type VariantProps } from "class-variance-authority";')
            else:
                add_import('import { cva } from "class-variance-authority";')
        if options.typescript:
            add_import(f'import type {{ {svelte_attributes_import(element_type)} }} from "{ATTRIBUTES_MODULE}";')
        for info in carried_imports(metadata, Target.SVELTE):
            add_import(render_import(info, QUOTE))

        definition = variant_definition(metadata, QUOTE)
        if definition:
            declarations.append(Declaration(DeclarationKind.VARIANT, name=variant.name, code=definition))

        planned = planned_props(props, metadata)
        pattern = metadata.state_pattern
        value_prop = pattern.value_prop if pattern is not None else None

        if options.typescript:
            declarations.append(self._prop_type(component, planned, metadata, element_type))

        bindings: List[PropBinding] = []
        if declares_class(component, metadata):
            class_local = local_name(component, "className")
            bindings.append(PropBinding(name="class", local=class_local, default="undefined", type="string"))
        for prop in planned:
            default = format_default(prop_default(prop, metadata), QUOTE)
            if prop.name == value_prop:
                bindings.append(
                    PropBinding(
                        name=prop.name, local=prop.local_name, default=default or "false", type=prop.type, bindable=True
                    )
                )
            else:
                bindings.append(PropBinding(name=prop.name, local=prop.local_name, default=default, type=prop.type))
        if forwards_ref(component, metadata):
            param = metadata.ref_forward.param_name
            bindings.append(
                PropBinding(name=REF_KEY, local=param, default="null", type=metadata.ref_forward.element_type, bindable=True)
            )
        bindings.append(PropBinding(name="children"))
        bindings.append(PropBinding(name=REST_PROPS, rest=True))
        declarations.append(Declaration(DeclarationKind.PROP_BINDING, name="props", bindings=bindings))

        if pattern is not None:
            labels = pattern.labels
            declarations.append(
                Declaration(
                    DeclarationKind.DERIVED,
                    name=DATA_STATE_NAME,
                    value=f'{local_name(component, pattern.value_prop)} ? "{labels.true}" : "{labels.false}"',
                )
            )
        for name, initial in component.state.items():
            declarations.append(Declaration(DeclarationKind.STATE, name=name, value=strip_props_access(initial)))
        for body in component.effects:
            declarations.append(Declaration(DeclarationKind.EFFECT, value=strip_props_access(body)))
        if pattern is not None and pattern.matches(component.props):
            value = local_name(component, pattern.value_prop)
            lines = [f"function {TOGGLE_HANDLER}() {{"]
            if component.has_prop("disabled"):
                lines.append(f"{INDENT}if ({local_name(component, 'disabled')}) return;")
            lines.append(f"{INDENT}{value} = !{value};")
            lines.append(f"{INDENT}{local_name(component, pattern.change_prop)}?.({value});")
            lines.append("}")
            declarations.append(Declaration(DeclarationKind.HANDLER, name=TOGGLE_HANDLER, code="\n".join(lines)))
        return sort_declarations(declarations)

    @staticmethod
    def _prop_type(
        component: ComponentDefinition,
        planned: List[PropDefinition],
        metadata: ComponentMetadata,
        element_type: str,
    ) -> Declaration:
        extends = [svelte_attributes_type(element_type)]
        variant = metadata.variant
        if variant is not None:
            extends.append(f"VariantProps<typeof {variant.name}>")
        members: List[str] = []
        if declares_class(component, metadata):
            members.append(f"{INDENT}class?: string;")
        for prop in planned:
            if variant is not None and prop.name in variant.variants:
                continue
            marker = "?" if prop.optional else ""
            members.append(f"{INDENT}{prop.name}{marker}: {prop.type};")
        if forwards_ref(component, metadata):
            members.append(f"{INDENT}ref?: {metadata.ref_forward.element_type} | null;")
        return Declaration(
            DeclarationKind.PROP_TYPE,
            name="Props",
            code="\n".join(members),
            value=", ".join(extends),
        )


# =============================================================================
# Markup
# =============================================================================


class _MarkupRenderer:
    def __init__(self, component: ComponentDefinition, metadata: ComponentMetadata, runes: bool) -> None:
        self.component = component
        self.metadata = metadata
        self.runes = runes
        self.planner = MarkupPlanner(component, metadata)
        self.variant_name = metadata.variant.name if metadata.variant is not None else None
        self.uses_class_merge = False
        self._root: Optional[Element] = None

    @property
    def placeholder(self) -> str:
        return RUNES_PLACEHOLDER if self.runes else LEGACY_PLACEHOLDER

    def render(self, nodes: List[IRNode]) -> str:
        self._root = find_root_element(nodes)
        lines: List[str] = []
        for node in nodes:
            lines.extend(self._node(node, 0))
        return "\n".join(lines)

    def _node(self, node: IRNode, depth: int) -> List[str]:
        pad = INDENT * depth
        if isinstance(node, Element):
            return self._element(node, depth)
        if isinstance(node, Text):
            if node.is_expression:
                return [f"{pad}{{{strip_props_access(node.text)}}}"]
            return [f"{pad}{node.text}"]
        if isinstance(node, Fragment):
            return render_children(node.children, self._node, depth, INDENT)
        if isinstance(node, ConditionalShow):
            guard = strip_props_access(node.guard)
            return [f"{pad}{{#if {guard}}}", *self._node(node.child, depth + 1), f"{pad}{{/if}}"]
        if isinstance(node, Slot):
            return [f"{pad}{self.placeholder}"]
        unhandled_node(node)

    def _event(self, name: str) -> str:
        match = _EVENT_NAME.match(name)
        event = match.group(1).lower() if match else name.lower()
        return f"on{event}" if self.runes else f"on:{event}"

    def _planned(self, attribute: PlannedAttribute) -> str:
        if attribute.kind is AttributeKind.STATIC:
            return f'{attribute.name}="{attribute.value}"'
        if attribute.kind is AttributeKind.EVENT:
            return f"{self._event(attribute.name)}={{{attribute.value}}}"
        return f"{attribute.name}={{{attribute.value}}}"

    def _attributes(self, element: Element) -> List[str]:
        rendered: List[str] = []
        class_binding = element.bindings.get(CLASS_KEY)
        if class_binding is not None:
            expression = translate_class_expression(class_binding.code, Target.SVELTE, self.variant_name)
            if uses_class_merge_call(expression):
                self.uses_class_merge = True
            rendered.append(f"class={{{expression}}}")
        elif CLASS_KEY in element.static_attributes:
            rendered.append(f'class="{element.static_attributes[CLASS_KEY]}"')
        for name, value in element.static_attributes.items():
            if name == CLASS_KEY:
                continue
            rendered.append(f'{attribute_name(name)}="{value}"')
        for name, binding in element.bindings.items():
            if name in (CLASS_KEY, REF_KEY, SPREAD_KEY) or binding.kind is not BindingKind.EXPRESSION:
                continue
            rendered.append(f"{attribute_name(name)}={{{strip_props_access(binding.code)}}}")
        planned = self.planner.attributes_for(
            element, element is self._root, lambda prop: local_name(self.component, prop)
        )
        rendered.extend(self._planned(attribute) for attribute in planned)
        ref = element.bindings.get(REF_KEY)
        if ref is not None:
            rendered.append(f"bind:this={{{strip_props_access(ref.code)}}}")
        for name, binding in element.bindings.items():
            if binding.kind is BindingKind.EVENT:
                rendered.append(f"{self._event(name)}={{{strip_props_access(binding.code)}}}")
        if element.has_spread:
            rest = REST_PROPS if self.runes else LEGACY_REST_PROPS
            rendered.append(f"{{...{rest}}}")
        return rendered

    def _element(self, element: Element, depth: int) -> List[str]:
        pad = INDENT * depth
        tag = element.tag
        attributes = self._attributes(element)
        if element.is_wrapped_primitive:
            attributes.insert(0, f"this={{{tag}}}")
            tag = "svelte:component"
        opening = f"<{tag}{''.join(' ' + attr for attr in attributes)}"
        if element.is_void:
            return [f"{pad}{opening} />"]
        children = render_children(element.children, self._node, depth + 1, INDENT)
        if not children and self.planner.needs_placeholder(element):
            children = [f"{pad}{INDENT}{self.placeholder}"]
        if not children:
            return [f"{pad}{opening}></{tag}>"]
        if len(children) == 1 and not any(isinstance(child, (Element, ConditionalShow)) for child in element.children):
            return [f"{pad}{opening}>{children[0].strip()}</{tag}>"]
        return [f"{pad}{opening}>", *children, f"{pad}</{tag}>"]


__all__ = ["SvelteGenerator", "serialize_script", "RUNES_PLACEHOLDER", "LEGACY_PLACEHOLDER"]
