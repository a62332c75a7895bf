"""Plugin pipeline, registry and built-in plugins."""

from __future__ import annotations

from .base import PHASES, ContextMetadata, ConverterPlugin, PluginContext, validate_plugin
from .pipeline import PluginPipeline
from .registry import (
    available_plugins,
    clear_registry,
    default_plugins,
    get_plugin,
    load_entry_point_plugins,
    register_plugin,
)

__all__ = [
    "PHASES",
    "ContextMetadata",
    "ConverterPlugin",
    "PluginContext",
    "PluginPipeline",
    "validate_plugin",
    "available_plugins",
    "clear_registry",
    "default_plugins",
    "get_plugin",
    "load_entry_point_plugins",
    "register_plugin",
]

# Ensure built-in converter plugins are registered.
from . import builtins as _builtin_converter_plugins  # noqa: E402,F401
