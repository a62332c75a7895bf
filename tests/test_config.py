import pytest

from component_converter.config import (
    ConverterOptions,
    SvelteOptions,
    Target,
    VueOptions,
    find_config_file,
    load_config,
    options_from_mapping,
)
from component_converter.errors import ConverterConfigError, UnsupportedTargetError


def test_defaults() -> None:
    options = ConverterOptions()
    assert options.target is Target.SVELTE
    assert options.typescript is True
    assert options.emit_formatted is False
    assert options.svelte.runes is True
    assert options.format_timeout == 10.0


def test_class_merge_path_per_target() -> None:
    assert ConverterOptions().class_merge_path == "$lib/utils"
    assert ConverterOptions(target="vue").class_merge_path == "@/lib/utils"
    assert ConverterOptions(class_merge_import_path="~/cn").class_merge_path == "~/cn"


def test_target_parse() -> None:
    assert Target.parse(" Vue ") is Target.VUE
    with pytest.raises(UnsupportedTargetError) as excinfo:
        Target.parse("react")
    assert excinfo.value.code == "CC002"


def test_merged_ignores_none_and_rebuilds_svelte_options() -> None:
    base = ConverterOptions()
    merged = base.merged(svelte_version=4, typescript=None, target="vue")
    assert merged.target is Target.VUE
    assert merged.typescript is True
    assert merged.svelte.version == 4
    assert merged.svelte.runes is False
    assert base.svelte.version == 5


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ConverterConfigError):
        ConverterOptions(svelte=SvelteOptions(version=3))
    with pytest.raises(ConverterConfigError):
        ConverterOptions().merged(format_timeout=0)
    with pytest.raises(ConverterConfigError):
        ConverterOptions(vue=VueOptions(script_setup=False))


def test_runes_can_be_disabled_on_svelte_5() -> None:
    assert SvelteOptions(version=5, use_runes=False).runes is False


# ============================================================================
# Configuration files
# ============================================================================


def test_load_converter_toml(tmp_path) -> None:
    config = tmp_path / "component-converter.toml"
    config.write_text('target = "vue"\ntypescript = false\n\n[svelte]\nversion = 4\n')
    options = load_config(config)
    assert options.target is Target.VUE
    assert options.typescript is False
    assert options.svelte.version == 4
    assert options.svelte.runes is False


def test_pyproject_section_is_discovered(tmp_path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.component-converter]\nclass_merge_import_path = "~/utils"\n'
    )
    nested = tmp_path / "src" / "ui"
    nested.mkdir(parents=True)
    assert find_config_file(nested) == tmp_path / "pyproject.toml"
    options = load_config(start=nested)
    assert options.class_merge_path == "~/utils"


def test_pyproject_without_section_is_skipped(tmp_path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
    (tmp_path / "component-converter.toml").write_text('target = "vue"\n')
    assert find_config_file(tmp_path).name == "component-converter.toml"


def test_unknown_keys_are_rejected(tmp_path) -> None:
    config = tmp_path / "component-converter.toml"
    config.write_text('target = "vue"\nrunes = true\n')
    with pytest.raises(ConverterConfigError) as excinfo:
        load_config(config)
    assert "runes" in str(excinfo.value)
    assert excinfo.value.code == "CC007"


def test_missing_explicit_path(tmp_path) -> None:
    with pytest.raises(ConverterConfigError):
        load_config(tmp_path / "absent.toml")


def test_invalid_toml_is_reported(tmp_path) -> None:
    config = tmp_path / "component-converter.toml"
    config.write_text("target = \n")
    with pytest.raises(ConverterConfigError) as excinfo:
        load_config(config)
    assert str(config) in excinfo.value.format()


def test_tables_must_be_tables() -> None:
    with pytest.raises(ConverterConfigError):
        options_from_mapping({"svelte": 5})
