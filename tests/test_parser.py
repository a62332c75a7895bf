import pytest

from component_converter.errors import ConverterSyntaxError
from component_converter.ir import ConditionalShow, Element, ImportCategory, Slot, Text
from component_converter.ir.nodes import REF_KEY, SPREAD_KEY, BindingKind
from component_converter.mappings.elements import normalize_element_type
from component_converter.parser import (
    ComponentKind,
    SourceUnit,
    analyze_variant_configs,
    categorize_import,
    discover_components,
    parse_source,
)
from component_converter.parser.jsx import jsx_text_value


# ============================================================================
# Syntax tree
# ============================================================================


def test_invalid_source_raises_syntax_error() -> None:
    with pytest.raises(ConverterSyntaxError) as excinfo:
        parse_source("export function Broken() { return <div> }", path="Broken.tsx")
    assert excinfo.value.code == "CC001"
    assert "Broken.tsx" in excinfo.value.format()


def test_empty_source_yields_warning_not_error() -> None:
    result = parse_source("   \n")
    assert result.primary is None
    assert result.warnings == ["Source is empty"]


# ============================================================================
# Discovery
# ============================================================================


def test_discovers_all_three_component_shapes(tabs_source, switch_source) -> None:
    kinds = {c.name: c.kind for c in discover_components(SourceUnit(tabs_source))}
    assert kinds == {
        "Tabs": ComponentKind.RE_EXPORT,
        "TabsList": ComponentKind.FORWARD_REF,
        "TabsTrigger": ComponentKind.FORWARD_REF,
    }
    found = discover_components(SourceUnit(switch_source))
    assert [(c.name, c.kind) for c in found] == [("ToggleSwitch", ComponentKind.FUNCTION)]


def test_re_export_is_marked(tabs_source) -> None:
    result = parse_source(tabs_source)
    tabs = result.get("Tabs")
    assert tabs is not None
    assert tabs.is_re_export
    assert tabs.re_export_target == "TabsPrimitive.Root"
    assert result.primary.name == "TabsList"


def test_lowercase_declarations_are_not_components(button_source) -> None:
    names = [c.name for c in discover_components(SourceUnit(button_source))]
    assert names == ["Button"]


# ============================================================================
# Variant configurations
# ============================================================================


def test_variant_configuration_extraction(button_source) -> None:
    warnings = []
    configs = analyze_variant_configs(SourceUnit(button_source), warnings)
    config = configs["buttonVariants"]
    assert config.base_classes.startswith("inline-flex items-center")
    assert config.axis_names == ["variant", "size"]
    assert config.allowed_values("variant") == ["default", "destructive", "outline"]
    assert config.default_variants == {"variant": "default", "size": "default"}
    assert warnings == []


def test_multiple_configurations_and_template_base() -> None:
    source = '''
const a = cva(`base ${extra}`, { variants: { tone: { x: "1" } } })
const b = cva("other", { variants: { size: { sm: "s", lg: "l" } }, defaultVariants: { size: "sm" } })
'''
    configs = analyze_variant_configs(SourceUnit(source), [])
    assert set(configs) == {"a", "b"}
    assert configs["a"].base_classes == "base ${extra}"
    assert configs["b"].default_variants == {"size": "sm"}


def test_unknown_default_is_dropped_with_warning() -> None:
    source = 'const v = cva("x", { variants: { tone: { a: "1" } }, defaultVariants: { size: "sm" } })\n'
    warnings = []
    configs = analyze_variant_configs(SourceUnit(source), warnings)
    assert configs["v"].default_variants == {}
    assert any("size" in warning for warning in warnings)


# ============================================================================
# Ref forwarding
# ============================================================================


def test_forward_ref_element_type_and_param(button_source, panel_source) -> None:
    button = parse_source(button_source).primary
    assert button.ref_forward.element_type == "HTMLButtonElement"
    assert button.ref_forward.param_name == "ref"
    panel = parse_source(panel_source).primary
    assert panel.ref_forward.element_type == "HTMLDivElement"
    assert panel.ref_forward.param_name == "forwardedRef"


def test_element_ref_types_are_normalized(tabs_source) -> None:
    result = parse_source(tabs_source)
    assert result.get("TabsList").ref_forward.element_type == "HTMLDivElement"
    assert result.get("TabsTrigger").ref_forward.element_type == "HTMLButtonElement"


def test_normalize_element_type_fallbacks() -> None:
    assert normalize_element_type("HTMLInputElement") == "HTMLInputElement"
    assert normalize_element_type("React.ElementRef<typeof FancyPrimitive.Trigger>") == "HTMLButtonElement"
    assert normalize_element_type("React.ElementRef<typeof Widget>") == "HTMLElement"
    assert normalize_element_type('React.ElementRef<"a">') == "HTMLAnchorElement"
    assert normalize_element_type('React.ElementRef<"marquee">') == "HTMLElement"
    assert normalize_element_type("Widget") == "HTMLElement"


# ============================================================================
# Props
# ============================================================================


def test_props_from_named_interface_with_variant_axes(button_source) -> None:
    button = parse_source(button_source).primary
    names = [prop.name for prop in button.props]
    assert names == ["asChild", "variant", "size"]
    variant = button.find_prop("variant")
    assert variant.is_variant
    assert variant.default_value == "default"
    assert variant.allowed_values == ["default", "destructive", "outline"]


def test_props_from_destructured_parameters_mark_variants(badge_source) -> None:
    badge = parse_source(badge_source).primary
    assert [prop.name for prop in badge.props] == ["className", "variant"]
    variant = badge.find_prop("variant")
    assert variant.is_variant
    assert variant.default_value == "default"
    assert badge.find_prop("className").type == "string"


def test_destructured_defaults_and_aliases() -> None:
    source = '''
export function Notice({ tone: kind = "info", size = 2, ...rest }) {
  return <p>{kind}</p>
}
'''
    notice = parse_source(source).primary
    assert notice.find_prop("tone").default_value == '"info"'
    assert notice.find_prop("size").default_value == "2"
    assert notice.find_prop("tone").local_name == "kind"
    assert notice.find_prop("size").local_name is None
    assert not notice.has_prop("rest")


def test_inline_parameter_annotation_supplies_types() -> None:
    source = '''
export function Card({ title: heading, className, count = 1 }: { title: string; className?: string; count?: number }) {
  return <h2 className={className}>{heading} {count}</h2>
}
'''
    card = parse_source(source).primary
    title = card.find_prop("title")
    assert title.type == "string"
    assert title.optional is False
    assert title.local_name == "heading"
    count = card.find_prop("count")
    assert count.type == "number"
    assert count.optional is True
    assert count.default_value == "1"
    assert card.find_prop("className").optional is True


def test_declared_props_pick_up_destructured_aliases() -> None:
    source = '''
interface TagProps {
  label: string
}

export function Tag({ label: text }: TagProps) {
  return <span>{text}</span>
}
'''
    tag = parse_source(source).primary
    assert tag.find_prop("label").local_name == "text"


def test_interface_jsdoc_and_optionality() -> None:
    source = '''
interface LabelProps {
  /** Text shown next to the control */
  text: string
  hint?: string
}

export function Label({ text, hint }: LabelProps) {
  return <label>{text}</label>
}
'''
    label = parse_source(source).primary
    text = label.find_prop("text")
    assert text.type == "string"
    assert text.optional is False
    assert text.description == "Text shown next to the control"
    assert label.find_prop("hint").optional is True


def test_whole_file_props_declaration_is_last_resort() -> None:
    source = '''
type SharedProps = { label: string }

export function Caption() {
  return <span>caption</span>
}
'''
    caption = parse_source(source).primary
    assert [prop.name for prop in caption.props] == ["label"]


def test_state_props_are_detected(switch_source) -> None:
    toggle = parse_source(switch_source).primary
    checked = toggle.find_prop("checked")
    assert checked.is_state_prop
    assert checked.type == "boolean"
    assert checked.data_state_values.false == "unchecked"
    assert not toggle.find_prop("disabled").is_state_prop


# ============================================================================
# Imports
# ============================================================================


def test_import_categories() -> None:
    assert categorize_import("react", []) is ImportCategory.REACT
    assert categorize_import("@radix-ui/react-switch", []) is ImportCategory.PRIMITIVE
    assert categorize_import("lucide-react", ["Check"]) is ImportCategory.ICON
    assert categorize_import("@/lib/utils", ["cn"]) is ImportCategory.UTILITY
    assert categorize_import("./button.css", []) is ImportCategory.STYLE
    assert categorize_import("zod", ["z"]) is ImportCategory.OTHER


def test_class_merge_flag_requires_call() -> None:
    imported_only = 'import { cn } from "@/lib/utils"\nexport function Box() { return <div className="box" /> }\n'
    assert parse_source(imported_only).shared.uses_class_merge is False


def test_class_merge_flag_set_when_called(switch_source) -> None:
    assert parse_source(switch_source).shared.uses_class_merge is True


def test_primitive_usage_is_reported(tabs_source) -> None:
    result = parse_source(tabs_source)
    assert any("@radix-ui/react-tabs" in warning for warning in result.warnings)


# ============================================================================
# JSX conversion
# ============================================================================


def test_jsx_attributes_become_bindings(button_source) -> None:
    root = parse_source(button_source).primary.root[0]
    assert isinstance(root, Element)
    assert root.tag == "button"
    assert root.bindings["class"].code == "cn(buttonVariants({ variant, size, className }))"
    assert root.bindings[REF_KEY].code == "ref"
    assert root.bindings[SPREAD_KEY].kind is BindingKind.SPREAD
    assert root.bindings[SPREAD_KEY].code == "props"


def test_mapped_primitive_keeps_source_tag(tabs_source) -> None:
    root = parse_source(tabs_source).get("TabsTrigger").root[0]
    assert root.tag == "button"
    assert root.source_tag == "TabsPrimitive.Trigger"


def test_event_attributes_are_tagged() -> None:
    source = 'export function Clicker({ onPress }) { return <button onClick={onPress} disabled>Go</button> }\n'
    root = parse_source(source).primary.root[0]
    assert root.bindings["onClick"].kind is BindingKind.EVENT
    assert root.static_attributes["disabled"] == "true"
    assert root.children == [Text("Go")]


def test_jsx_text_follows_line_trimming_rules() -> None:
    assert jsx_text_value("  Hello   world  ") == " Hello world "
    assert jsx_text_value("\n    Hello\n    world\n  ") == "Hello world"
    assert jsx_text_value("Total: ") == "Total: "
    assert jsx_text_value(".00 (") == ".00 ("
    assert jsx_text_value("\n      ") == ""


def test_text_around_expressions_keeps_its_spacing() -> None:
    source = 'export function Price({ amount }) { return <span>Total: {amount} USD</span> }\n'
    root = parse_source(source).primary.root[0]
    assert root.children == [Text("Total: "), Text("amount", is_expression=True), Text(" USD")]


def test_conditionals_slots_and_void_elements(alert_source) -> None:
    root = parse_source(alert_source).primary.root[0]
    assert root.static_attributes["role"] == "alert"
    guarded = [child for child in root.children if isinstance(child, ConditionalShow)]
    assert [show.guard for show in guarded] == ["title", "open", "!(open)"]
    assert guarded[0].child.tag == "h5"
    image = [child for child in root.children if isinstance(child, Element) and child.tag == "img"][0]
    assert image.children == []
    assert isinstance(root.children[-1], Slot)


def test_markup_free_component_degrades_to_warning(panel_source) -> None:
    result = parse_source(panel_source)
    assert result.primary.root == []
    assert any("no markup found" in warning for warning in result.warnings)


def test_state_and_effects_are_extracted(counter_source) -> None:
    counter = parse_source(counter_source).primary
    assert counter.state == {"count": "start"}
    assert counter.effects == ["document.title = `Count ${count}`"]
