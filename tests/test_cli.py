import pytest

from component_converter import __version__
from component_converter.cli import build_parser, main
from component_converter.plugins import ConverterPlugin, register_plugin


@pytest.fixture
def button_file(tmp_path, button_source):
    path = tmp_path / "Button.tsx"
    path.write_text(button_source)
    return path


@pytest.fixture
def tabs_file(tmp_path, tabs_source):
    path = tmp_path / "tabs.tsx"
    path.write_text(tabs_source)
    return path


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["convert", "Button.tsx"])
    assert args.target is None
    assert args.svelte_version is None
    assert args.all is False
    assert args.func.__name__ == "cmd_convert"


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "convert" in capsys.readouterr().out


def test_version(capsys) -> None:
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_convert_writes_file(button_file, tmp_path) -> None:
    out = tmp_path / "out"
    assert main(["convert", str(button_file), "-t", "svelte", "-o", str(out)]) == 0
    code = (out / "Button.svelte").read_text()
    assert "}: Props = $props();" in code


def test_convert_all_skips_re_exports(tabs_file, tmp_path) -> None:
    out = tmp_path / "out"
    assert main(["convert", str(tabs_file), "--all", "-o", str(out)]) == 0
    assert sorted(path.name for path in out.iterdir()) == ["TabsList.svelte", "TabsTrigger.svelte"]


def test_single_component_goes_to_stdout(button_file, capsys) -> None:
    assert main(["convert", str(button_file), "-t", "vue"]) == 0
    captured = capsys.readouterr()
    assert captured.out.startswith('<script setup lang="ts">')
    assert "<template>" in captured.out


def test_flags_reach_the_generator(button_file, capsys) -> None:
    assert main(["convert", str(button_file), "--no-typescript", "--svelte-version", "4", "--format"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<script>\n")
    assert "export { className as class };" in out
    assert "\n\n\n" not in out


def test_missing_component_exits_with_error(button_file, capsys) -> None:
    assert main(["convert", str(button_file), "-c", "Missing"]) == 1
    err = capsys.readouterr().err
    assert "CC006" in err
    assert "Button" in err


def test_unreadable_input(tmp_path, capsys) -> None:
    assert main(["convert", str(tmp_path / "absent.tsx")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_configuration_file_is_applied(button_file, tmp_path, capsys) -> None:
    (tmp_path / "component-converter.toml").write_text('target = "vue"\n')
    assert main(["convert", str(button_file)]) == 0
    assert "<script setup" in capsys.readouterr().out


def test_invalid_configuration_is_reported(button_file, tmp_path, capsys) -> None:
    config = tmp_path / "bad.toml"
    config.write_text("unknown_key = 1\n")
    assert main(["convert", str(button_file), "--config", str(config)]) == 1
    assert "CC007" in capsys.readouterr().err


def test_registered_plugin_can_be_enabled(button_file, capsys, isolated_registry) -> None:
    class Banner(ConverterPlugin):
        name = "banner"
        order = 99

        def post_generate(self, code, context):
            return f"<!-- generated from {context.target_component} -->\n{code}"

    register_plugin(Banner)
    assert main(["convert", str(button_file), "-p", "banner"]) == 0
    assert capsys.readouterr().out.startswith("<!-- generated from Button -->\n")


def test_unknown_plugin_is_reported(button_file, capsys) -> None:
    assert main(["convert", str(button_file), "--plugin", "missing"]) == 1
    assert "missing" in capsys.readouterr().err
