import pytest

from component_converter.errors import IRInvariantError, UnhandledNodeError, VariantConfigError
from component_converter.ir import (
    ComponentDefinition,
    ComponentMetadata,
    ConditionalShow,
    DataStateValues,
    Element,
    Fragment,
    ParseResult,
    PropDefinition,
    Slot,
    Text,
    VariantConfig,
    child_nodes,
    contains_slot,
    find_root_element,
    walk,
)


# ============================================================================
# Node invariants
# ============================================================================


def test_void_element_rejects_children() -> None:
    with pytest.raises(IRInvariantError):
        Element(tag="img", children=[Text("caption")])


def test_void_element_rejects_added_child() -> None:
    element = Element(tag="input")
    with pytest.raises(IRInvariantError):
        element.add_child(Text("x"))


def test_component_reference_detection() -> None:
    assert Element(tag="SwitchPrimitives.Root").is_component_reference
    assert Element(tag="SwitchPrimitives.Root").is_wrapped_primitive
    assert Element(tag="Icon").is_component_reference
    assert not Element(tag="div").is_component_reference


def test_walk_is_depth_first_pre_order() -> None:
    inner = Element(tag="span", children=[Text("a")])
    guarded = ConditionalShow(guard="open", child=inner)
    root = Element(tag="div", children=[guarded, Slot()])
    kinds = [type(node).__name__ for node in walk([root])]
    assert kinds == ["Element", "ConditionalShow", "Element", "Text", "Slot"]


def test_find_root_element_looks_through_fragments_and_guards() -> None:
    target = Element(tag="button")
    nodes = [Text("leading"), Fragment(children=[ConditionalShow(guard="x", child=target)])]
    assert find_root_element(nodes) is target
    assert find_root_element([Text("only text")]) is None


def test_contains_slot() -> None:
    assert contains_slot([Element(tag="div", children=[Fragment(children=[Slot()])])])
    assert not contains_slot([Element(tag="div")])


def test_unknown_node_kind_fails_loudly() -> None:
    with pytest.raises(UnhandledNodeError):
        child_nodes(object())


# ============================================================================
# Metadata invariants
# ============================================================================


def test_variant_defaults_must_name_known_axes() -> None:
    with pytest.raises(VariantConfigError) as excinfo:
        VariantConfig(
            name="buttonVariants",
            variants={"variant": {"default": "A"}},
            default_variants={"size": "sm"},
        )
    assert "size" in str(excinfo.value)


def test_variant_union_type() -> None:
    config = VariantConfig(name="v", variants={"variant": {"default": "A", "destructive": "B"}})
    assert config.union_type("variant") == '"default" | "destructive"'
    assert config.union_type("variant", "'") == "'default' | 'destructive'"


def test_state_prop_requires_labels() -> None:
    with pytest.raises(IRInvariantError):
        PropDefinition(name="checked", is_state_prop=True)
    prop = PropDefinition(
        name="checked",
        is_state_prop=True,
        data_state_values=DataStateValues(true="checked", false="unchecked"),
    )
    assert prop.data_state_values.true == "checked"


def test_component_validate_flags_orphan_variant_props() -> None:
    component = ComponentDefinition(name="Chip", props=[PropDefinition(name="tone", is_variant=True)])
    problems = component.validate({})
    assert problems and "tone" in problems[0]


def test_parse_result_convertible_skips_re_exports() -> None:
    alias = ComponentDefinition(name="Tabs", is_re_export=True, re_export_target="TabsPrimitive.Root")
    real = ComponentDefinition(name="TabsList")
    result = ParseResult(primary=real, components=[alias, real])
    assert [c.name for c in result.convertible] == ["TabsList"]
    assert result.get("Tabs") is alias
    assert result.get("Missing") is None


def test_metadata_field_names_cover_every_concern() -> None:
    names = ComponentMetadata.field_names()
    for expected in ("variant", "ref_forward", "imports", "state_props", "state_pattern"):
        assert expected in names
