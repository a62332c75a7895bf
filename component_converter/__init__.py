"""
Convert React TSX UI components into Svelte and Vue single-file components.

The public entry points are :class:`ComponentConverter` and the synchronous
:func:`convert` / :func:`convert_all` helpers.
"""

__version__ = "0.1.0"

from .config import ConverterOptions, SvelteOptions, Target, VueOptions, load_config
from .converter import ComponentConverter, ConversionResult, convert, convert_all
from .errors import (
    ComponentNotFoundError,
    ConverterConfigError,
    ConverterError,
    ConverterSyntaxError,
    IRInvariantError,
    PluginConfigurationError,
    PluginRegistryError,
    UnsupportedTargetError,
    VariantConfigError,
)
from .formatting import PrettierFormatter, WhitespaceFormatter
from .parser import parse_source
from .plugins import ConverterPlugin, PluginContext, PluginPipeline, register_plugin
from .repair import repair_markup

__all__ = [
    "__version__",
    "ComponentConverter",
    "ConversionResult",
    "convert",
    "convert_all",
    "ConverterOptions",
    "SvelteOptions",
    "VueOptions",
    "Target",
    "load_config",
    "parse_source",
    "repair_markup",
    "ConverterPlugin",
    "PluginContext",
    "PluginPipeline",
    "register_plugin",
    "PrettierFormatter",
    "WhitespaceFormatter",
    "ConverterError",
    "ConverterSyntaxError",
    "UnsupportedTargetError",
    "VariantConfigError",
    "IRInvariantError",
    "PluginConfigurationError",
    "PluginRegistryError",
    "ComponentNotFoundError",
    "ConverterConfigError",
]
