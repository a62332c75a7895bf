import pytest

from component_converter import ComponentConverter, ConverterOptions, Target, convert, convert_all
from component_converter.errors import ComponentNotFoundError, ConverterSyntaxError
from component_converter.plugins import ConverterPlugin


# ============================================================================
# End-to-end scenarios
# ============================================================================


def test_button_scenario_svelte(button_source) -> None:
    """Ref forwarding, a two-axis variant configuration and a class merge call."""
    result = convert(button_source, target="svelte")
    code = result.code
    assert result.success
    assert result.filename == "Button.svelte"
    assert "class: className = undefined," in code
    assert 'variant = "default",' in code
    assert 'size = "default",' in code
    assert "<button class={cn(buttonVariants({ variant, size }), className)}" in code
    assert code.count("ref = $bindable(null)") == 1
    assert 'import { cn } from "$lib/utils";' in code


def test_button_scenario_vue(button_source) -> None:
    result = convert(button_source, target="vue")
    code = result.code
    assert result.filename == "Button.vue"
    assert "  class?: string;" in code
    assert "  variant: 'default'," in code
    assert "  size: 'default'," in code
    assert '<button :class="cn(buttonVariants({ variant: props.variant, size: props.size }), props.class)"' in code
    assert code.count("const elementRef = ref<HTMLButtonElement | null>(null);") == 1


def test_switch_scenario(switch_source) -> None:
    """State props synthesize a toggle handler, a derived label and root-only attributes."""
    for target in ("svelte", "vue"):
        code = convert(switch_source, target=target).code
        assert "function toggle() {" in code
        assert "dataState" in code
        assert code.count('role="switch"') == 1
        span_line = [line for line in code.splitlines() if "<span" in line][0]
        assert "data-state" in span_line
        assert "role=" not in span_line


PRIMITIVE_SWITCH_SOURCE = '''
import * as React from "react"
import * as SwitchPrimitives from "@radix-ui/react-switch"

export function Switch({ checked, onCheckedChange, className, ...rest }) {
  return (
    <SwitchPrimitives.Root className={className} {...rest}>
      <SwitchPrimitives.Thumb className="block data-[state=checked]:translate-x-5" />
    </SwitchPrimitives.Root>
  )
}
'''


def test_primitive_root_gets_button_attributes_with_or_without_normalization() -> None:
    for options in (ConverterOptions(), ConverterOptions(normalize_primitives=False)):
        for target in (Target.SVELTE, Target.VUE):
            code = convert(PRIMITIVE_SWITCH_SOURCE, options.merged(target=target)).code
            root_line = [line for line in code.splitlines() if line.lstrip().startswith("<button")][0]
            assert 'type="button"' in root_line
            assert 'role="switch"' in root_line


def test_re_export_scenario(tabs_source) -> None:
    results = convert_all(tabs_source, target="svelte")
    assert set(results) == {"TabsList", "TabsTrigger"}
    trigger = results["TabsTrigger"]
    assert trigger.filename == "TabsTrigger.svelte"
    assert "<button class={cn(" in trigger.code
    assert "@radix-ui" not in trigger.code


def test_convert_all_vue(tabs_source) -> None:
    results = ComponentConverter(ConverterOptions(target=Target.VUE)).convert_all_sync(tabs_source)
    assert sorted(results) == ["TabsList", "TabsTrigger"]
    assert all(result.filename.endswith(".vue") for result in results.values())
    assert "<div :class=" in results["TabsList"].code


# ============================================================================
# Selection and errors
# ============================================================================


def test_named_component_selection(tabs_source) -> None:
    result = convert(tabs_source, component="TabsTrigger")
    assert result.component == "TabsTrigger"


def test_missing_component_raises(tabs_source) -> None:
    with pytest.raises(ComponentNotFoundError) as excinfo:
        convert(tabs_source, component="Tabs")
    assert "TabsList" in excinfo.value.format()


def test_empty_source_raises_component_not_found() -> None:
    with pytest.raises(ComponentNotFoundError):
        convert("")


def test_syntax_error_propagates() -> None:
    with pytest.raises(ConverterSyntaxError):
        convert("export const Broken = () => <div>", target="vue")


def test_extraction_warnings_are_reported(panel_source) -> None:
    result = convert(panel_source)
    assert any("no markup found" in warning for warning in result.warnings)
    assert "<div class={className} bind:this={forwardedRef} {...restProps}>" in result.code


def test_legacy_svelte_output(button_source) -> None:
    code = convert(button_source, ConverterOptions().merged(svelte_version=4)).code
    assert "export { className as class };" in code
    assert "<slot />" in code
    assert "$props()" not in code


# ============================================================================
# Plugins through the converter
# ============================================================================


async def test_failing_plugin_does_not_abort_conversion(button_source) -> None:
    class Exploding(ConverterPlugin):
        name = "exploding"

        def pre_parse(self, source, context):
            raise ValueError("bad input")

        def post_generate(self, code, context):
            raise ValueError("bad output")

    converter = ComponentConverter(extra_plugins=[Exploding()])
    result = await converter.convert(button_source)
    assert "Plugin exploding pre_parse error: bad input" in result.warnings
    assert "Plugin exploding post_generate error: bad output" in result.warnings
    assert "<button" in result.code


async def test_async_post_generate_plugin(button_source) -> None:
    class Banner(ConverterPlugin):
        name = "banner"
        order = 99

        async def post_generate(self, code, context):
            return f"<!-- {context.target_component} -->\n{code}"

    result = await ComponentConverter(extra_plugins=[Banner()]).convert(button_source, target="vue")
    assert result.code.startswith("<!-- Button -->\n<script setup")


async def test_generation_failure_in_convert_all(tabs_source) -> None:
    class RejectTrigger(ConverterPlugin):
        name = "reject-trigger"

        def pre_generate(self, result, context):
            trigger = result.get("TabsTrigger")
            trigger.root = ["not a node"]
            return result

    results = await ComponentConverter(extra_plugins=[RejectTrigger()]).convert_all(tabs_source)
    assert results["TabsList"].success
    failed = results["TabsTrigger"]
    assert not failed.success
    assert failed.code == ""
    assert any(warning.startswith("Failed to convert TabsTrigger:") for warning in failed.warnings)


async def test_conversions_do_not_share_warnings(panel_source, button_source) -> None:
    converter = ComponentConverter()
    first = await converter.convert(panel_source)
    second = await converter.convert(button_source)
    assert any("no markup found" in warning for warning in first.warnings)
    assert not any("no markup found" in warning for warning in second.warnings)


def test_explicit_plugin_list_replaces_defaults(button_source) -> None:
    code = ComponentConverter(plugins=[]).convert_sync(button_source, target="svelte").code
    assert "}: Props = $props();" in code
