import asyncio

import pytest

from component_converter import ComponentConverter, ConverterOptions
from component_converter.config import Target
from component_converter.formatting import FormatterError, PrettierFormatter, WhitespaceFormatter, format_code


def test_whitespace_formatter_collapses_blank_lines() -> None:
    text = "\n\n<script>  \n\n\n\n  let a = 1;\n</script>"
    assert WhitespaceFormatter().format(text, Target.SVELTE) == "<script>\n\n  let a = 1;\n</script>\n"


def test_whitespace_formatter_options() -> None:
    formatter = WhitespaceFormatter(max_empty_lines=0, insert_final_newline=False)
    assert formatter.format("a\n\n\nb\n", Target.VUE) == "a\nb"


async def test_failing_formatter_returns_input_with_warning() -> None:
    class Broken:
        def format(self, text, target):
            raise ValueError("no parser")

    warnings = []
    out = await format_code("<div></div>", Target.SVELTE, Broken(), warnings=warnings)
    assert out == "<div></div>"
    assert warnings == ["Formatting failed, returning unformatted output: no parser"]


async def test_slow_formatter_times_out() -> None:
    class Slow:
        async def format(self, text, target):
            await asyncio.sleep(1)
            return "never"

    warnings = []
    out = await format_code("x", Target.VUE, Slow(), timeout=0.01, warnings=warnings)
    assert out == "x"
    assert warnings == ["Formatting timed out after 0.01s, returning unformatted output"]


async def test_async_formatter_result_is_used() -> None:
    class Upper:
        async def format(self, text, target):
            return text.upper()

    assert await format_code("abc", Target.SVELTE, Upper()) == "ABC"


def test_prettier_missing_binary_raises() -> None:
    with pytest.raises(FormatterError):
        PrettierFormatter(command=("nonexistent-binary-xyz",)).format("<div />", Target.SVELTE)


def test_converter_degrades_when_formatter_fails(button_source) -> None:
    """A failing formatter never fails the conversion."""

    class Broken:
        def format(self, text, target):
            raise RuntimeError("crashed")

    options = ConverterOptions(emit_formatted=True)
    result = ComponentConverter(options, formatter=Broken()).convert_sync(button_source)
    assert result.success
    assert "<button" in result.code
    assert "Formatting failed, returning unformatted output: crashed" in result.warnings


def test_converter_uses_whitespace_formatter_by_default(button_source) -> None:
    result = ComponentConverter(ConverterOptions(emit_formatted=True)).convert_sync(button_source, target="vue")
    assert result.code.endswith("</template>\n")
    assert "\n\n\n" not in result.code
