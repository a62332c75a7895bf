import pytest

from component_converter.config import ConverterOptions, Target
from component_converter.errors import PluginConfigurationError, PluginRegistryError
from component_converter.parser import parse_source
from component_converter.plugins import (
    ConverterPlugin,
    PluginContext,
    PluginPipeline,
    available_plugins,
    clear_registry,
    default_plugins,
    get_plugin,
    register_plugin,
    validate_plugin,
)
from component_converter.plugins import registry
from component_converter.plugins.consolidation import MetadataConsolidationPlugin
from component_converter.plugins.runes import SvelteRunesPlugin, rewrite_markup, rewrite_script


def _context(target=Target.SVELTE, **overrides):
    options = ConverterOptions(target=target).merged(**overrides)
    return PluginContext(source_code="", target=options.target, options=options)


class Recorder(ConverterPlugin):
    def __init__(self, name, order, log):
        self.name = name
        self.order = order
        self.log = log

    def post_generate(self, code, context):
        self.log.append(self.name)
        return code + f"[{self.name}]"


# ============================================================================
# Ordering and isolation
# ============================================================================


async def test_hooks_run_in_order_with_stable_ties() -> None:
    """Plugins run by ascending order; equal orders keep input order."""
    log = []
    pipeline = PluginPipeline([Recorder("late", 30, log), Recorder("early", 10, log), Recorder("late-2", 30, log)])
    code = await pipeline.run_post_generate("", _context())
    assert log == ["early", "late", "late-2"]
    assert code == "[early][late][late-2]"
    assert pipeline.names == ["early", "late", "late-2"]


async def test_failing_hook_is_isolated() -> None:
    class Broken(ConverterPlugin):
        name = "broken"
        order = 20

        def post_parse(self, result, context):
            result.components.clear()
            raise RuntimeError("boom")

    result = parse_source("export function Card() { return <div /> }\n")
    context = _context()
    after = await PluginPipeline([Broken()]).run_post_parse(result, context)
    assert [c.name for c in after.components] == ["Card"]
    assert context.warnings == ["Plugin broken post_parse error: boom"]


async def test_none_return_keeps_value_and_async_hooks_are_awaited() -> None:
    class Observer(ConverterPlugin):
        name = "observer"

        def pre_parse(self, source, context):
            return None

    class Suffix(ConverterPlugin):
        name = "suffix"
        order = 60

        async def pre_parse(self, source, context):
            return source + "// tail\n"

    source = await PluginPipeline([Suffix(), Observer()]).run_pre_parse("const a = 1\n", _context())
    assert source == "const a = 1\n// tail\n"


async def test_applies_to_filters_plugins() -> None:
    context = _context(Target.VUE)
    code = await PluginPipeline([SvelteRunesPlugin()]).run_post_generate("<div on:click={x}><slot /></div>", context)
    assert code == "<div on:click={x}><slot /></div>"


# ============================================================================
# Validation and registry
# ============================================================================


def test_validate_plugin_rejects_bad_declarations() -> None:
    class Nameless(ConverterPlugin):
        pass

    class Typo(ConverterPlugin):
        name = "typo"
        reads = frozenset({"variants"})

    class BadOrder(ConverterPlugin):
        name = "bad-order"
        order = "first"

    with pytest.raises(PluginConfigurationError):
        validate_plugin(Nameless())
    with pytest.raises(PluginConfigurationError) as excinfo:
        validate_plugin(Typo())
    assert "variants" in str(excinfo.value)
    assert excinfo.value.code == "CC005"
    with pytest.raises(PluginConfigurationError):
        PluginPipeline([BadOrder()])


def test_builtin_plugins_are_registered() -> None:
    names = available_plugins()
    for expected in ("metadata-consolidation", "svelte5-runes", "primitive-repair"):
        assert expected in names
    assert get_plugin("svelte5-runes") is SvelteRunesPlugin


def test_default_plugins_depend_on_target() -> None:
    svelte = [plugin.name for plugin in default_plugins(Target.SVELTE)]
    vue = [plugin.name for plugin in default_plugins("vue")]
    assert "svelte5-runes" in svelte
    assert "svelte5-runes" not in vue
    assert "metadata-consolidation" in vue and "primitive-repair" in vue


def test_register_duplicate_and_unknown(isolated_registry) -> None:
    class Extra(ConverterPlugin):
        name = "extra"

    register_plugin(Extra, default=True, targets=["vue"])
    assert get_plugin("extra") is Extra
    assert "extra" in [plugin.name for plugin in default_plugins(Target.VUE)]
    with pytest.raises(PluginRegistryError):
        register_plugin(Extra)
    with pytest.raises(PluginRegistryError):
        get_plugin("missing")


def test_registry_is_restored_after_isolated_test() -> None:
    assert "extra" not in available_plugins()


# ============================================================================
# Built-in plugins
# ============================================================================


async def test_consolidation_attaches_metadata(button_source) -> None:
    result = parse_source(button_source)
    context = _context()
    result = await PluginPipeline([MetadataConsolidationPlugin()]).run_post_parse(result, context)
    button = result.get("Button")
    assert button.metadata.variant.name == "buttonVariants"
    assert button.metadata.ref_forward.element_type == "HTMLButtonElement"
    assert context.metadata.component_metadata["Button"].uses_class_merge is True


def test_runes_rewrite_without_declarations() -> None:
    code = (
        "<script>\n"
        "  export let open = false;\n"
        "  export let className = undefined;\n"
        '  $: label = open ? "on" : "off";\n'
        "</script>\n\n"
        "<div on:click={toggle} {...$$restProps}><slot /></div>\n"
    )
    out = SvelteRunesPlugin().post_generate(code, _context())
    assert "    open = false," in out
    assert "    class: className = undefined," in out
    assert "    ...restProps" in out
    assert "} = $props();" in out
    assert 'let label = $derived(open ? "on" : "off");' in out
    assert "export let" not in out
    assert "<div onclick={toggle} {...restProps}>{@render children?.()}</div>" in out


def test_rewrite_script_lifecycle_and_types() -> None:
    script = (
        '\n  import { onMount } from "svelte";\n'
        '  export let ref: $$Props["ref"] = null;\n'
        "  onMount(() => {\n    focus();\n  });\n"
    )
    out = rewrite_script(script, typescript=True)
    assert "onMount" not in out
    assert "$effect(() => {" in out
    assert "ref = $bindable(null)" in out
    assert "}: Props = $props();" in out
    assert 'import type { HTMLAttributes } from "svelte/elements";' in out


def test_rewrite_markup() -> None:
    assert rewrite_markup("<button on:click={go}>{$$props.x}<slot /></button>") == (
        "<button onclick={go}>{restProps.x}{@render children?.()}</button>"
    )


def test_entry_point_plugins_are_registered(isolated_registry, monkeypatch) -> None:
    class Shouter(ConverterPlugin):
        name = "shouter"

    class FakeEntryPoint:
        name = "shouter"

        def load(self):
            return Shouter

    def fake_entry_points(group):
        assert group == registry.ENTRY_POINT_GROUP
        return [FakeEntryPoint()]

    monkeypatch.setattr(registry.importlib.metadata, "entry_points", fake_entry_points)
    assert registry.load_entry_point_plugins() == ["shouter"]
    assert get_plugin("shouter") is Shouter
    assert registry.load_entry_point_plugins() == []


def test_clear_registry(isolated_registry) -> None:
    clear_registry()
    assert available_plugins() == []
    assert default_plugins(Target.SVELTE) == []
