"""Vue 3 single-file component generator (``<script setup>`` + ``<template>``)."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

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
    change_prop_event,
    declares_class,
    fallback_root,
    format_default,
    forwards_ref,
    is_change_prop,
    output_filename,
    planned_props,
    prop_default,
    render_children,
    render_import,
    resolve_metadata,
    sort_declarations,
    variant_definition,
)
from .classes import (
    attribute_safe_quotes,
    rename_identifiers,
    strip_props_access,
    translate_class_expression,
    uses_class_merge_call,
)

logger = logging.getLogger(__name__)

QUOTE = "'"
INDENT = "  "
PLACEHOLDER = "<slot />"
ELEMENT_REF_NAME = "elementRef"

_EVENT_NAME = re.compile(r"^on([A-Z]\w*)$")

# Runtime constructors for ``defineProps({...})`` without TypeScript.
RUNTIME_TYPES: Dict[str, str] = {
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "object": "Object",
    "array": "Array",
    "function": "Function",
}


def runtime_type(type_text: str) -> str:
    text = type_text.strip()
    if text in RUNTIME_TYPES:
        return RUNTIME_TYPES[text]
    if text.endswith("[]") or text.startswith("Array<"):
        return "Array"
    if "=>" in text:
        return "Function"
    if text and all(part.strip()[:1] in "'\"" for part in text.split("|")):
        return "String"
    return "null"


def ref_name(metadata: ComponentMetadata) -> str:
    """The template ref; ``ref`` itself is reserved in ``<script setup>``."""
    param = metadata.ref_forward.param_name if metadata.ref_forward else REF_KEY
    return ELEMENT_REF_NAME if param == REF_KEY else param


def _template_expression(code: str, renames: Optional[Dict[str, str]] = None) -> str:
    return attribute_safe_quotes(rename_identifiers(strip_props_access(code), renames or {}))


def _indent(text: str, depth: int = 1) -> str:
    pad = INDENT * depth
    return "\n".join(f"{pad}{line}" if line else "" for line in text.splitlines())


class VueGenerator:
    """Emit a Vue 3 single-file component."""

    target = Target.VUE

    def generate(
        self,
        component: ComponentDefinition,
        props: List[PropDefinition],
        options: ConverterOptions,
    ) -> GeneratedComponent:
        metadata = resolve_metadata(component)
        renderer = _TemplateRenderer(component, metadata)

        used_fallback = not component.root
        nodes: List[IRNode] = list(component.root)
        if used_fallback:
            logger.debug(f"{component.name}: synthesizing root element")
            nodes = [fallback_root(component, metadata)]
        template = renderer.render(nodes)

        declarations = self._declarations(component, props, metadata, options, renderer.uses_class_merge)
        ordered = sort_declarations(declarations)
        imports = "\n".join(decl.code for decl in ordered if decl.kind is DeclarationKind.IMPORT)
        sections = [imports] if imports else []
        sections.extend(decl.code for decl in ordered if decl.kind is not DeclarationKind.IMPORT and decl.code)
        opening = '<script setup lang="ts">' if options.typescript else "<script setup>"
        script = f"{opening}\n" + "\n\n".join(sections) + "\n</script>"
        markup = f"<template>\n{_indent(template)}\n</template>"
        return GeneratedComponent(
            name=component.name,
            target=self.target,
            declarations=ordered,
            declaration_block=script,
            markup_block=markup,
            filename=output_filename(component, options),
            used_fallback=used_fallback,
        )

    def _declarations(
        self,
        component: ComponentDefinition,
        props: List[PropDefinition],
        metadata: ComponentMetadata,
        options: ConverterOptions,
        uses_class_merge: bool,
    ) -> List[Declaration]:
        typescript = options.typescript
        pattern = metadata.state_pattern
        planned = [prop for prop in planned_props(props, metadata) if not is_change_prop(prop.name)]
        change_props = [prop for prop in props if is_change_prop(prop.name)]
        refs = forwards_ref(component, metadata)
        declarations: List[Declaration] = []

        vue_names = set()
        if pattern is not None:
            vue_names.add("computed")
        if refs or component.state:
            vue_names.add("ref")
        if component.effects:
            vue_names.add("onMounted")
        if vue_names:
            declarations.append(
                Declaration(DeclarationKind.IMPORT, code=f"import {{ {', '.join(sorted(vue_names))} }} from 'vue';")
            )
        if uses_class_merge or metadata.base_classes:
            declarations.append(
                Declaration(DeclarationKind.IMPORT, code=f"import {{ cn }} from '{options.class_merge_path}';")
            )
        if metadata.variant is not None:
            declarations.append(
                Declaration(DeclarationKind.IMPORT, code="import { cva } from 'class-variance-authority';")
            )
        for info in carried_imports(metadata, Target.VUE):
            declarations.append(Declaration(DeclarationKind.IMPORT, code=render_import(info, QUOTE)))

        definition = variant_definition(metadata, QUOTE)
        if definition:
            declarations.append(Declaration(DeclarationKind.VARIANT, name=metadata.variant.name, code=definition))

        has_class = declares_class(component, metadata)
        if typescript:
            declarations.append(self._prop_type(planned, metadata, has_class))
        declarations.append(self._prop_binding(planned, metadata, has_class, typescript))

        if change_props:
            declarations.append(self._emits(change_props, props, typescript))

        if pattern is not None:
            labels = pattern.labels
            declarations.append(
                Declaration(
                    DeclarationKind.DERIVED,
                    name=DATA_STATE_NAME,
                    code=(
                        f"const {DATA_STATE_NAME} = computed(() => "
                        f"(props.{pattern.value_prop} ? '{labels.true}' : '{labels.false}'));"
                    ),
                )
            )
        if refs:
            name = ref_name(metadata)
            element_type = metadata.ref_forward.element_type
            created = f"ref<{element_type} | null>(null)" if typescript else "ref(null)"
            declarations.append(
                Declaration(
                    DeclarationKind.REF,
                    name=name,
                    code=f"const {name} = {created};\n\ndefineExpose({{ {name} }});",
                )
            )
        aliases = {prop.local_name: f"props.{prop.name}" for prop in component.props if prop.local_name}
        for name, initial in component.state.items():
            initial = rename_identifiers(initial, aliases)
            declarations.append(Declaration(DeclarationKind.STATE, name=name, code=f"const {name} = ref({initial});"))
        for body in component.effects:
            body = rename_identifiers(body, aliases)
            declarations.append(
                Declaration(DeclarationKind.EFFECT, code=f"onMounted(() => {{\n{_indent(body)}\n}});")
            )
        if pattern is not None and pattern.matches(component.props):
            emit = f"emit('{pattern.emit_event}', !props.{pattern.value_prop});"
            if component.has_prop("disabled"):
                body = f"{INDENT}if (!props.disabled) {{\n{INDENT * 2}{emit}\n{INDENT}}}"
            else:
                body = f"{INDENT}{emit}"
            declarations.append(
                Declaration(DeclarationKind.HANDLER, name=TOGGLE_HANDLER, code=f"function {TOGGLE_HANDLER}() {{\n{body}\n}}")
            )
        return declarations

    @staticmethod
    def _prop_type(planned: List[PropDefinition], metadata: ComponentMetadata, has_class: bool) -> Declaration:
        variant = metadata.variant
        members: List[str] = []
        if has_class:
            members.append(f"{INDENT}class?: string;")
        for prop in planned:
            marker = "?" if prop.optional else ""
            if variant is not None and prop.name in variant.variants:
                prop_type = variant.union_type(prop.name, QUOTE)
            else:
                prop_type = prop.type.replace('"', "'")
            members.append(f"{INDENT}{prop.name}{marker}: {prop_type};")
        body = "\n".join(members)
        code = f"interface Props {{\n{body}\n}}" if members else "interface Props {}"
        return Declaration(DeclarationKind.PROP_TYPE, name="Props", code=code)

    @staticmethod
    def _prop_binding(
        planned: List[PropDefinition],
        metadata: ComponentMetadata,
        has_class: bool,
        typescript: bool,
    ) -> Declaration:
        bindings: List[PropBinding] = []
        if has_class:
            bindings.append(PropBinding(name="class", type="string"))
        for prop in planned:
            bindings.append(
                PropBinding(name=prop.name, default=format_default(prop_default(prop, metadata), QUOTE), type=prop.type)
            )
        if typescript:
            defaults = [binding for binding in bindings if binding.default is not None]
            if defaults:
                entries = "\n".join(f"{INDENT}{binding.name}: {binding.default}," for binding in defaults)
                code = f"const props = withDefaults(defineProps<Props>(), {{\n{entries}\n}});"
            else:
                code = "const props = defineProps<Props>();"
        else:
            entries = []
            for binding in bindings:
                options = f"type: {runtime_type(binding.type)}"
                if binding.default is not None:
                    options += f", default: {binding.default}"
                entries.append(f"{INDENT}{binding.name}: {{ {options} }},")
            code = "const props = defineProps({\n" + "\n".join(entries) + "\n});" if entries else "const props = defineProps({});"
        return Declaration(DeclarationKind.PROP_BINDING, name="props", code=code, bindings=bindings)

    @staticmethod
    def _emits(
        change_props: List[PropDefinition],
        props: List[PropDefinition],
        typescript: bool,
    ) -> Declaration:
        by_name = {prop.name: prop for prop in props}
        events: List[str] = []
        signatures: List[str] = []
        for prop in change_props:
            subject = change_prop_event(prop.name)
            event = f"update:{subject}"
            value = by_name.get(subject)
            if subject == "modelValue":
                value_type = "string"
            elif value is not None and value.type != "unknown":
                value_type = value.type.replace('"', "'")
            else:
                value_type = "boolean"
            events.append(event)
            signatures.append(f"{INDENT}'{event}': [value: {value_type}];")
        if typescript:
            code = "const emit = defineEmits<{\n" + "\n".join(signatures) + "\n}>();"
        else:
            code = "const emit = defineEmits([" + ", ".join(f"'{event}'" for event in events) + "]);"
        return Declaration(DeclarationKind.EMITS, name="emit", code=code)


class _TemplateRenderer:
    def __init__(self, component: ComponentDefinition, metadata: ComponentMetadata) -> None:
        self.component = component
        self.metadata = metadata
        self.planner = MarkupPlanner(component, metadata)
        self.variant_name = metadata.variant.name if metadata.variant is not None else None
        self.ref_name = ref_name(metadata)
        # Templates reach props by their public name, not the destructured alias.
        self.renames = {prop.local_name: prop.name for prop in component.props if prop.local_name}
        self.uses_class_merge = False
        self._root: Optional[Element] = None

    def render(self, nodes: List[IRNode]) -> str:
        self._root = find_root_element(nodes)
        lines: List[str] = []
        for node in nodes:
            lines.extend(self._node(node, 0))
        return "\n".join(lines)

    def _node(self, node: IRNode, depth: int, directive: Optional[str] = None) -> List[str]:
        pad = INDENT * depth
        if isinstance(node, Element):
            return self._element(node, depth, directive)
        if directive is not None:
            # Only elements take directives; wrap anything else in a template.
            return [f"{pad}<template {directive}>", *self._node(node, depth + 1), f"{pad}</template>"]
        if isinstance(node, ConditionalShow):
            return self._node(node.child, depth, f'v-if="{_template_expression(node.guard, self.renames)}"')
        if isinstance(node, Text):
            if node.is_expression:
                return [f"{pad}{{{{ {rename_identifiers(strip_props_access(node.text), self.renames)} }}}}"]
            return [f"{pad}{node.text}"]
        if isinstance(node, Fragment):
            return render_children(node.children, self._node, depth, INDENT)
        if isinstance(node, Slot):
            return [f"{pad}{PLACEHOLDER}"]
        unhandled_node(node)

    @staticmethod
    def _event(name: str) -> str:
        match = _EVENT_NAME.match(name)
        return "@" + (match.group(1).lower() if match else name.lower())

    def _planned(self, attribute: PlannedAttribute) -> str:
        if attribute.kind is AttributeKind.STATIC:
            return f'{attribute.name}="{attribute.value}"'
        if attribute.kind is AttributeKind.EVENT:
            return f'{self._event(attribute.name)}="{attribute.value}"'
        return f':{attribute.name}="{attribute.value}"'

    def _attributes(self, element: Element) -> List[str]:
        rendered: List[str] = []
        class_binding = element.bindings.get(CLASS_KEY)
        if class_binding is not None:
            expression = translate_class_expression(
                rename_identifiers(class_binding.code, self.renames), Target.VUE, self.variant_name
            )
            if uses_class_merge_call(expression):
                self.uses_class_merge = True
            rendered.append(f':class="{expression}"')
        elif CLASS_KEY in element.static_attributes:
            rendered.append(f'class="{element.static_attributes[CLASS_KEY]}"')
        for name, value in element.static_attributes.items():
            if name == CLASS_KEY:
                continue
            rendered.append(f'{attribute_name(name)}="{value}"')
        for name, binding in element.bindings.items():
            if name in (CLASS_KEY, REF_KEY, SPREAD_KEY) or binding.kind is not BindingKind.EXPRESSION:
                continue
            rendered.append(f':{attribute_name(name)}="{_template_expression(binding.code, self.renames)}"')
        planned = self.planner.attributes_for(element, element is self._root, lambda prop: prop)
        rendered.extend(self._planned(attribute) for attribute in planned)
        if REF_KEY in element.bindings:
            rendered.append(f'ref="{self.ref_name}"')
        for name, binding in element.bindings.items():
            if binding.kind is BindingKind.EVENT:
                rendered.append(f'{self._event(name)}="{_template_expression(binding.code, self.renames)}"')
        if element.has_spread:
            rendered.append('v-bind="$attrs"')
        return rendered

    def _element(self, element: Element, depth: int, directive: Optional[str]) -> List[str]:
        pad = INDENT * depth
        tag = element.tag
        attributes = self._attributes(element)
        if directive is not None:
            attributes.insert(0, directive)
        if element.is_wrapped_primitive:
            attributes.insert(0, f':is="{tag}"')
            tag = "component"
        opening = f"<{tag}{''.join(' ' + attr for attr in attributes)}"
        children = render_children(element.children, self._node, depth + 1, INDENT)
        if not children and self.planner.needs_placeholder(element):
            children = [f"{pad}{INDENT}{PLACEHOLDER}"]
        if not children:
            if self.planner.self_closing(element):
                return [f"{pad}{opening} />"]
            return [f"{pad}{opening}></{tag}>"]
        if len(children) == 1 and not any(isinstance(child, (Element, ConditionalShow)) for child in element.children):
            return [f"{pad}{opening}>{children[0].strip()}</{tag}>"]
        return [f"{pad}{opening}>", *children, f"{pad}</{tag}>"]


__all__ = ["VueGenerator", "runtime_type", "ref_name", "PLACEHOLDER"]
