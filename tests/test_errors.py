from component_converter.errors import (
    ComponentNotFoundError,
    ConverterError,
    ConverterSyntaxError,
    ErrorLocation,
    UnsupportedTargetError,
)


def test_format_includes_location_code_and_hint() -> None:
    """Formatted errors carry location, code and hint."""
    error = ConverterSyntaxError("Unexpected token", path="Button.tsx", line=3, column=7, hint="Check the JSX")
    assert error.format() == "Unexpected token (Button.tsx:3:7; CC001) Hint: Check the JSX"
    assert str(error) == "Unexpected token"


def test_format_without_location() -> None:
    error = ComponentNotFoundError("Component 'X' not found")
    assert error.format() == "Component 'X' not found (CC006)"


def test_class_level_hint_is_used() -> None:
    error = UnsupportedTargetError("Unsupported target 'react'")
    assert "Hint: Supported targets are 'svelte' and 'vue'." in error.format()


def test_plain_error_has_no_metadata() -> None:
    assert ConverterError("boom").format() == "boom"


def test_location_descriptions() -> None:
    assert ErrorLocation(line=1, column=2).describe() == "line 1, column 2"
    assert ErrorLocation(path="a.tsx").describe() == "a.tsx"
    assert ErrorLocation().describe() == "unknown location"
