"""Unified error model for the component converter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        if self.path and self.line is not None and self.column is not None:
            return f"{self.path}:{self.line}:{self.column}"
        if self.line is not None and self.column is not None:
            return f"line {self.line}, column {self.column}"
        if self.path:
            return self.path
        return "unknown location"


class ConverterError(Exception):
    """Base class for every error surfaced to callers of the converter."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class ConverterSyntaxError(ConverterError):
    """Raised when the component source cannot be turned into a syntax tree."""

    code = "CC001"


class UnsupportedTargetError(ConverterError):
    """Raised when a conversion target is not one of the supported frameworks."""

    code = "CC002"
    hint = "Supported targets are 'svelte' and 'vue'."


class VariantConfigError(ConverterError):
    """Raised when a variant configuration violates its invariants."""

    code = "CC003"


class IRInvariantError(ConverterError):
    """Raised when an IR node is constructed in an invalid shape."""

    code = "CC004"


class PluginConfigurationError(ConverterError):
    """Raised when a plugin declares metadata fields that do not exist."""

    code = "CC005"


class PluginRegistryError(ConverterError):
    """Raised when plugin registration or lookup fails."""


class ComponentNotFoundError(ConverterError):
    """Raised when a requested component is not defined in the source unit."""

    code = "CC006"


class ConverterConfigError(ConverterError):
    """Raised when a configuration file or option value is invalid."""

    code = "CC007"


class UnhandledNodeError(ConverterError):
    """Raised when a consumer meets an IR node kind it does not know."""


__all__ = [
    "ErrorLocation",
    "ConverterError",
    "ConverterSyntaxError",
    "UnsupportedTargetError",
    "VariantConfigError",
    "IRInvariantError",
    "PluginConfigurationError",
    "PluginRegistryError",
    "ComponentNotFoundError",
    "ConverterConfigError",
    "UnhandledNodeError",
]
